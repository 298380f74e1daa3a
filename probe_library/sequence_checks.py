"""
Per-sequence checks on the record table.

Each check takes the record table and returns a copy with one annotation
column added (0 = pass, non-zero = fail). Checks only read `id`/`seq`, so
they can run in any order or on their own.
"""

import re

import numpy as np
import pandas as pd

from probe_library.pipeline_utils import logger
from probe_library.record_table import require_columns

LENGTH_WINDOW = 100
STANDARD_BASES = re.compile(r'[ACGTacgt]*')
COMPLEMENT = str.maketrans('ACGTacgt', 'TGCAtgca')


def reverse_complement(seq):
    """Reverse complement of an A/C/G/T sequence, keeping case."""
    if not STANDARD_BASES.fullmatch(seq):
        bad = sorted(set(seq) - set('ACGTacgt'))
        raise ValueError(f"Cannot reverse complement sequence with non-ACGT characters: {bad}")
    return seq.translate(COMPLEMENT)[::-1]


def check_id_unique(df):
    """id_unique = number of other records sharing the exact same id."""
    require_columns(df, ['id'], 'id_unique check')
    out = df.copy()
    out['id_unique'] = (df.groupby('id', sort=False)['id'].transform('size') - 1).astype(int)
    return out


def check_seq_unique(df):
    """seq_unique = 1-based index of the duplicate group a sequence belongs to, 0 if unique.

    Groups are numbered by first appearance in the library.
    """
    require_columns(df, ['seq'], 'seq_unique check')
    out = df.copy()
    duplicated = df['seq'].duplicated(keep=False)
    group_index = pd.Series(0, index=df.index, dtype=int)
    if duplicated.any():
        dup_seqs = df.loc[duplicated, 'seq']
        group_index.loc[duplicated] = dup_seqs.groupby(dup_seqs, sort=False).ngroup() + 1
    out['seq_unique'] = group_index
    return out


def check_revcompl_unique(df):
    """Flag sequences whose reverse complement is also in the library.

    The sequence itself counts, so palindromes such as ACGT are flagged.
    Sequences with non-ACGT characters cannot be evaluated and get NA; they
    are reported by check_seq_standard instead.
    """
    require_columns(df, ['seq'], 'seq_revcompl_unique check')
    library_seqs = set(df['seq'])

    flags = []
    n_skipped = 0
    for seq in df['seq']:
        try:
            flags.append(reverse_complement(seq) in library_seqs)
        except ValueError:
            flags.append(pd.NA)
            n_skipped += 1

    if n_skipped:
        logger.warning(
            f"Reverse complement not evaluated for {n_skipped} sequence(s) with non-ACGT characters"
        )

    out = df.copy()
    out['seq_revcompl_unique'] = pd.array(flags, dtype='boolean')
    return out


def check_seq_length(df, max_length):
    """seq_length = 0 if max_length - 100 < len(seq) <= max_length, else 1."""
    require_columns(df, ['seq'], 'seq_length check')
    max_length = validate_max_length(max_length)
    min_length = max_length - LENGTH_WINDOW

    lengths = df['seq'].str.len()
    in_range = (lengths > min_length) & (lengths <= max_length)

    out = df.copy()
    out['seq_length'] = np.where(in_range, 0, 1)
    return out


def check_seq_standard(df):
    """seq_standard = 0 if the sequence only has A/C/G/T (any case), else 1."""
    require_columns(df, ['seq'], 'seq_standard check')
    standard = df['seq'].map(lambda seq: STANDARD_BASES.fullmatch(seq) is not None).astype(bool)

    out = df.copy()
    out['seq_standard'] = np.where(standard, 0, 1)
    return out


def validate_max_length(max_length):
    if max_length is None:
        raise ValueError("Maximum sequence length (max_length) is required")
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        raise ValueError(f"max_length must be a positive integer, got {max_length!r}")
    return max_length
