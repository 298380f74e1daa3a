"""
Aggregate the annotated record table into a summary and an overall status.
"""

import pandas as pd

ANNOTATION_COLUMNS = [
    'id_unique',
    'seq_revcompl_unique',
    'seq_unique',
    'seq_length',
    'seq_standard',
    'id_format',
]

REPORT_COLUMNS = ['id', 'shortId', 'tag', 'strictId'] + ANNOTATION_COLUMNS

SUMMARY_LABELS = {
    'n_sequences': 'Number of sequences',
    'id_unique': 'Duplicated ids',
    'seq_unique': 'Duplicated sequences',
    'seq_revcompl_unique': 'Reverse complement duplicates',
    'seq_length': 'Sequences out of length range',
    'seq_standard': 'Non-standard sequences',
    'id_format': 'Badly formatted ids',
}


def _failed(column):
    """Boolean mask of failing rows; NA counts as pass."""
    if pd.api.types.is_bool_dtype(column):
        return column.fillna(False).astype(bool)
    return column.fillna(0) != 0


def annotation_columns(df):
    """Annotation columns present in df, in report order."""
    return [col for col in ANNOTATION_COLUMNS if col in df.columns]


def summarize(df):
    """Count failing records per check.

    Returns:
        dict: Keys of SUMMARY_LABELS mapped to integer counts, in label order
    """
    summary = {'n_sequences': int(len(df))}
    for col in SUMMARY_LABELS:
        if col == 'n_sequences':
            continue
        summary[col] = int(_failed(df[col]).sum()) if col in df.columns else 0
    return summary


def overall_status(df):
    """1 if any annotation column flags any record, else 0."""
    for col in annotation_columns(df):
        if _failed(df[col]).any():
            return 1
    return 0


def report_table(df):
    """Annotated table without sequences, in read order."""
    columns = [col for col in REPORT_COLUMNS if col in df.columns]
    extra = [col for col in df.columns if col not in columns and col != 'seq']
    return df[columns + extra].reset_index(drop=True)


def format_summary(summary):
    """Render the summary as `<label>: <count>` lines."""
    return "\n".join(f"{SUMMARY_LABELS[key]}: {count}" for key, count in summary.items())


def failing_records(df):
    """Rows flagged by at least one check."""
    cols = annotation_columns(df)
    if not cols:
        return df.iloc[0:0]
    mask = pd.concat([_failed(df[col]) for col in cols], axis=1).any(axis=1)
    return df[mask]
