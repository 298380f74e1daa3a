"""
Identifier format and REF/ALT consistency checks.

A record passes `id_format` only if all of the following hold:
- the identifier follows the REF/ALT grammar
- its strict id (SHORTID_TAG) is unique in the library
- its short id group has exactly one REF
- its short id group has at least one ALT
- an ALT tag carries a non-negative integer

ALT numbers are not required to be unique or consecutive within a group.
"""

import pandas as pd

from probe_library.identifiers import REF_TAG, ALT_PREFIX, check_ref_alt_mode, decompose_identifiers, parse_alt_number
from probe_library.pipeline_utils import logger
from probe_library.record_table import require_columns

ID_FORMAT_REASONS = [
    'bad_grammar',
    'strict_id_duplicated',
    'ref_count',
    'no_alt',
    'alt_not_integer',
]


def id_format_flags(df):
    """Per-reason failure flags for every record.

    Expects the shortId/tag/strictId columns from decompose_identifiers.
    Records with an unmatched identifier only fail `bad_grammar`; they are
    left out of strict id and short id grouping.

    Returns:
        pd.DataFrame: One boolean column per entry of ID_FORMAT_REASONS
    """
    require_columns(df, ['shortId', 'tag', 'strictId'], 'id_format check')

    matched = df['strictId'].notna()
    flags = pd.DataFrame(False, index=df.index, columns=ID_FORMAT_REASONS)
    flags['bad_grammar'] = ~matched

    parsed = df.loc[matched, ['shortId', 'tag', 'strictId']]
    if parsed.empty:
        return flags

    # Strict id must be unique regardless of free text
    strict_counts = parsed.groupby('strictId', sort=False)['strictId'].transform('size')
    flags.loc[parsed.index, 'strict_id_duplicated'] = strict_counts != 1

    is_ref = parsed['tag'] == REF_TAG
    is_alt = parsed['tag'].str.startswith(ALT_PREFIX)
    by_short_id = parsed.assign(is_ref=is_ref, is_alt=is_alt).groupby('shortId', sort=False)

    n_ref = by_short_id['is_ref'].transform('sum')
    n_alt = by_short_id['is_alt'].transform('sum')
    flags.loc[parsed.index, 'ref_count'] = n_ref != 1
    flags.loc[parsed.index, 'no_alt'] = n_alt == 0

    alt_numbers = parsed.loc[is_alt, 'tag'].map(parse_alt_number)
    flags.loc[alt_numbers.index, 'alt_not_integer'] = alt_numbers.isna()

    return flags.astype(bool)


def check_id_format(df, ref_alt=True):
    """id_format = 1 if any identifier format or REF/ALT consistency check fails."""
    check_ref_alt_mode(ref_alt)
    require_columns(df, ['id'], 'id_format check')

    out = df if 'strictId' in df.columns else decompose_identifiers(df, ref_alt=ref_alt)
    flags = id_format_flags(out)

    for reason in ID_FORMAT_REASONS:
        n_failed = int(flags[reason].sum())
        if n_failed:
            logger.info(f"id_format: {n_failed} record(s) failed {reason}")

    out = out.copy()
    out['id_format'] = flags.any(axis=1).astype(int)
    return out
