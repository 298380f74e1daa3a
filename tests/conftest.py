import pytest

from probe_library.record_table import build_record_table


# Unique sequences of length 151 whose reverse complements are not in the set
CLEAN_SEQS = [
    "A" * 150 + "C",
    "A" * 150 + "G",
    "A" * 149 + "CC",
    "A" * 149 + "GC",
]


@pytest.fixture
def write_fasta(tmp_path):
    """Write (identifier, sequence) pairs to a FASTA file under tmp_path."""

    def _write(name, records):
        path = tmp_path / name
        with open(path, "w") as f:
            for identifier, seq in records:
                f.write(f">{identifier}\n{seq}\n")
        return path

    return _write


@pytest.fixture
def clean_seqs():
    return list(CLEAN_SEQS)


@pytest.fixture
def clean_records():
    return [
        ("lib_S1_REF", CLEAN_SEQS[0]),
        ("lib_S1_ALT_1", CLEAN_SEQS[1]),
        ("lib_S1_ALT_2", CLEAN_SEQS[2]),
    ]


@pytest.fixture
def table():
    """Build a record table from (id, seq) pairs."""
    return build_record_table
