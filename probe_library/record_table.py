"""
Record table: the in-memory library every check works on.

One row per FASTA record, in read order, with the original `id` and `seq`
strings. Checks add annotation columns to copies of this table.
"""

import pandas as pd

RECORD_COLUMNS = ['id', 'seq']


def build_record_table(records):
    """Build the record table from (identifier, sequence) pairs.

    Args:
        records: Iterable of (identifier, sequence) tuples in read order

    Returns:
        pd.DataFrame: Columns `id` and `seq` with a fresh RangeIndex
    """
    df = pd.DataFrame(list(records), columns=RECORD_COLUMNS, dtype=object)
    df = df.reset_index(drop=True)
    df['id'] = df['id'].astype(str)
    df['seq'] = df['seq'].fillna('').astype(str)
    return df


def require_columns(df, columns, check_name):
    """Raise if a check is handed a table without the columns it reads."""
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f"{check_name} needs columns missing from the record table: {missing}")
