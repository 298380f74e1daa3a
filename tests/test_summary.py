"""
Tests for summary and status aggregation (probe_library/summary.py)

Run: pytest tests/test_summary.py -v
"""

import pandas as pd

from probe_library.summary import (
    ANNOTATION_COLUMNS,
    SUMMARY_LABELS,
    failing_records,
    format_summary,
    overall_status,
    report_table,
    summarize,
)


def _annotated(**overrides):
    data = {
        "id": ["S1_REF", "S1_ALT_1"],
        "seq": ["AAC", "AAG"],
        "shortId": ["S1", "S1"],
        "tag": ["REF", "ALT_1"],
        "strictId": ["S1_REF", "S1_ALT_1"],
        "id_unique": [0, 0],
        "seq_revcompl_unique": pd.array([False, False], dtype="boolean"),
        "seq_unique": [0, 0],
        "seq_length": [0, 0],
        "seq_standard": [0, 0],
        "id_format": [0, 0],
    }
    data.update(overrides)
    return pd.DataFrame(data)


class TestSummarize:
    def test_clean(self):
        summary = summarize(_annotated())
        assert list(summary) == list(SUMMARY_LABELS)
        assert summary["n_sequences"] == 2
        assert all(count == 0 for key, count in summary.items() if key != "n_sequences")

    def test_counts(self):
        df = _annotated(
            id_unique=[1, 1],
            seq_unique=[0, 3],
            seq_revcompl_unique=pd.array([True, pd.NA], dtype="boolean"),
            seq_length=[1, 0],
            id_format=[1, 1],
        )
        summary = summarize(df)
        assert summary["id_unique"] == 2
        assert summary["seq_unique"] == 1
        assert summary["seq_revcompl_unique"] == 1
        assert summary["seq_length"] == 1
        assert summary["seq_standard"] == 0
        assert summary["id_format"] == 2

    def test_empty(self):
        summary = summarize(_annotated().iloc[0:0])
        assert set(summary.values()) == {0}


class TestOverallStatus:
    def test_clean_is_zero(self):
        assert overall_status(_annotated()) == 0

    def test_any_flag_fails(self):
        for col in ANNOTATION_COLUMNS:
            if col == "seq_revcompl_unique":
                df = _annotated(seq_revcompl_unique=pd.array([False, True], dtype="boolean"))
            else:
                df = _annotated(**{col: [0, 2]})
            assert overall_status(df) == 1, col

    def test_unevaluated_revcomp_passes(self):
        df = _annotated(seq_revcompl_unique=pd.array([pd.NA, False], dtype="boolean"))
        assert overall_status(df) == 0


class TestReport:
    def test_report_drops_seq_and_orders_columns(self):
        report = report_table(_annotated())
        assert "seq" not in report.columns
        assert list(report.columns) == [
            "id", "shortId", "tag", "strictId", "id_unique", "seq_revcompl_unique",
            "seq_unique", "seq_length", "seq_standard", "id_format",
        ]
        assert report["id"].tolist() == ["S1_REF", "S1_ALT_1"]

    def test_format_summary(self):
        text = format_summary(summarize(_annotated(seq_length=[1, 1])))
        lines = text.split("\n")
        assert len(lines) == 7
        assert lines[0] == "Number of sequences: 2"
        assert "Sequences out of length range: 2" in lines

    def test_failing_records(self):
        failed = failing_records(_annotated(seq_standard=[0, 1]))
        assert failed["id"].tolist() == ["S1_ALT_1"]
