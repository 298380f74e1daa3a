"""
Tests for identifier decomposition (probe_library/identifiers.py)

Run: pytest tests/test_identifiers.py -v
"""

import pandas as pd
import pytest

from probe_library.identifiers import (
    ParsedIdentifier,
    decompose_identifier,
    decompose_identifiers,
    parse_alt_number,
)


class TestDecomposeIdentifier:
    def test_free_text_ref(self):
        parsed = decompose_identifier("sample_S1_REF")
        assert parsed == ParsedIdentifier("sample", "S1", "REF")
        assert parsed.strict_id == "S1_REF"

    def test_no_free_text(self):
        parsed = decompose_identifier("S1_REF")
        assert parsed.free_text is None
        assert parsed.short_id == "S1"
        assert parsed.tag == "REF"

    def test_alt_with_underscored_free_text(self):
        parsed = decompose_identifier("my_lib_S1_ALT_12")
        assert parsed.free_text == "my_lib"
        assert parsed.short_id == "S1"
        assert parsed.tag == "ALT_12"
        assert parsed.strict_id == "S1_ALT_12"
        assert parse_alt_number(parsed.tag) == 12

    def test_alt_without_free_text(self):
        parsed = decompose_identifier("S1_ALT_1")
        assert parsed == ParsedIdentifier(None, "S1", "ALT_1")

    def test_non_integer_alt_does_not_match(self):
        assert decompose_identifier("sample_S1_ALT_x") is None

    @pytest.mark.parametrize("identifier", [
        "S1",
        "S1_ref",
        "S1_ALT",
        "S1_ALT_",
        "S1_REF_extra",
        "sample_S-1_REF",
        "S1_REF\n",
        "",
    ])
    def test_unmatched(self, identifier):
        assert decompose_identifier(identifier) is None

    def test_short_id_length_bound(self):
        assert decompose_identifier("x_" + "A" * 20 + "_REF").short_id == "A" * 20
        assert decompose_identifier("x_" + "A" * 21 + "_REF") is None

    def test_synthetic_mode_not_supported(self):
        with pytest.raises(NotImplementedError, match="not supported"):
            decompose_identifier("sample_S1", ref_alt=False)


class TestParseAltNumber:
    def test_values(self):
        assert parse_alt_number("ALT_0") == 0
        assert parse_alt_number("ALT_007") == 7
        assert parse_alt_number("ALT_x") is None
        assert parse_alt_number("ALT_-1") is None
        assert parse_alt_number("REF") is None
        assert parse_alt_number(pd.NA) is None


class TestDecomposeIdentifiers:
    def test_adds_columns(self, table):
        df = table([("a_S1_REF", "ACG"), ("junk", "CCA"), ("S1_ALT_1", "GGA")])
        out = decompose_identifiers(df)

        assert "shortId" not in df.columns
        assert out["shortId"].tolist()[0] == "S1"
        assert out["tag"].tolist()[2] == "ALT_1"
        assert out["strictId"].tolist()[0] == "S1_REF"
        assert out.loc[1, ["shortId", "tag", "strictId"]].isna().all()

    def test_empty_table(self, table):
        out = decompose_identifiers(table([]))
        assert list(out.columns) == ["id", "seq", "shortId", "tag", "strictId"]
        assert out.empty

    def test_synthetic_mode_not_supported(self, table):
        with pytest.raises(NotImplementedError):
            decompose_identifiers(table([("S1", "ACG")]), ref_alt=False)
