"""
Identifier decomposition for REF/ALT probe libraries.

Identifiers follow `(FREETEXT_)?SHORTID_(REF|ALT_<n>)`, e.g.
`rs123_chr1_S1_REF` or `S1_ALT_2`. SHORTID ties a REF probe to its ALT probes;
`SHORTID_TAG` is the strict identifier used for uniqueness.
"""

import re
from typing import NamedTuple, Optional

import pandas as pd

from probe_library.record_table import require_columns

SHORT_ID_MAX_LENGTH = 20
REF_TAG = 'REF'
ALT_PREFIX = 'ALT_'

REF_ALT_PATTERN = re.compile(
    r'(?:(?P<free_text>.*)_)?'
    r'(?P<short_id>[A-Za-z0-9]{1,%d})'
    r'_(?P<tag>REF|ALT_[0-9]+)' % SHORT_ID_MAX_LENGTH
)


class ParsedIdentifier(NamedTuple):
    free_text: Optional[str]
    short_id: str
    tag: str

    @property
    def strict_id(self):
        return f"{self.short_id}_{self.tag}"


def check_ref_alt_mode(ref_alt):
    if not ref_alt:
        raise NotImplementedError(
            "Synthetic (non REF/ALT) identifier mode is not supported; "
            "only REF/ALT libraries can be validated"
        )


def parse_alt_number(tag):
    """Return n for an `ALT_<n>` tag, or None if tag is not a valid ALT tag."""
    if not isinstance(tag, str) or not tag.startswith(ALT_PREFIX):
        return None
    suffix = tag[len(ALT_PREFIX):]
    if not suffix.isascii() or not suffix.isdigit():
        return None
    return int(suffix)


def decompose_identifier(identifier, ref_alt=True):
    """Split an identifier into free text, short id and REF/ALT tag.

    Args:
        identifier: Identifier string as read from the FASTA header
        ref_alt: Grammar mode; only REF/ALT is implemented

    Returns:
        ParsedIdentifier, or None if the identifier does not follow the grammar
    """
    check_ref_alt_mode(ref_alt)

    match = REF_ALT_PATTERN.fullmatch(identifier)
    if match is None:
        return None
    return ParsedIdentifier(match.group('free_text'), match.group('short_id'), match.group('tag'))


def decompose_identifiers(df, ref_alt=True):
    """Add shortId, tag and strictId columns (NA where the grammar fails)."""
    check_ref_alt_mode(ref_alt)
    require_columns(df, ['id'], 'Identifier decomposition')

    parsed = [decompose_identifier(identifier) for identifier in df['id']]

    out = df.copy()
    out['shortId'] = pd.Series([p.short_id if p else pd.NA for p in parsed], index=df.index, dtype=object)
    out['tag'] = pd.Series([p.tag if p else pd.NA for p in parsed], index=df.index, dtype=object)
    out['strictId'] = pd.Series([p.strict_id if p else pd.NA for p in parsed], index=df.index, dtype=object)
    return out
