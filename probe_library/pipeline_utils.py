"""
Shared utilities for the probe library validator.

Logging, YAML config loading, input file checks and FASTA reading live here
so the check modules stay free of I/O.
"""

import gzip
import logging
import os
import sys
from pathlib import Path

import pysam
import yaml

FASTA_EXTENSIONS = ('.fa', '.fasta')

# Configure logging only when needed, not at import time
logger = logging.getLogger(__name__)


def _configure_logging():
    """Configure logging only when explicitly needed."""
    root = logging.getLogger()
    if not logger.handlers and not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)


def log_print(*args, **kwargs):
    """Log message with INFO level and immediate flush."""
    _configure_logging()
    message = " ".join(str(arg) for arg in args)
    logger.info(message)
    sys.stderr.flush()


def add_log_file(log_file):
    """Send log records to log_file as well as stderr. Returns the handler."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logging.getLogger().addHandler(handler)
    return handler


# =============================================================================
# CONFIG
# =============================================================================


def load_config(config_file):
    """Load a YAML config file.

    Args:
        config_file: Path to the YAML file

    Returns:
        dict: Config values (empty if the file is empty)
    """
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")

    with open(config_file) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_file}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a YAML mapping: {config_file}")
    return config


# =============================================================================
# INPUT FILES
# =============================================================================


def has_fasta_extension(path):
    """True if path ends in .fa/.fasta, optionally followed by .gz."""
    suffixes = [s.lower() for s in Path(path).suffixes]
    if suffixes and suffixes[-1] == '.gz':
        suffixes = suffixes[:-1]
    return bool(suffixes) and suffixes[-1] in FASTA_EXTENSIONS


def check_input_files(fasta_files):
    """Fail fast on missing files or files without a FASTA extension.

    All files are checked before any of them is read.
    """
    if not fasta_files:
        raise ValueError("At least one FASTA file is required")

    for fasta_file in fasta_files:
        if not os.path.exists(fasta_file):
            raise FileNotFoundError(f"Input file not found: {fasta_file}")

    for fasta_file in fasta_files:
        if not has_fasta_extension(fasta_file):
            raise ValueError(f"Input file must have a .fa or .fasta extension: {fasta_file}")


def _has_content(path):
    """True if the (possibly gzipped) file holds anything besides whitespace."""
    opener = gzip.open if str(path).lower().endswith('.gz') else open
    with opener(path, 'rt') as f:
        for line in f:
            if line.strip():
                return True
    return False


def read_fasta_records(fasta_file):
    """Read (identifier, sequence) pairs from one FASTA file, in file order.

    The identifier is the whole header line: pysam splits it into name and
    comment, so the two are joined back with a single space.
    """
    records = []
    try:
        with pysam.FastxFile(str(fasta_file)) as fh:
            for entry in fh:
                identifier = entry.name
                if entry.comment:
                    identifier = f"{identifier} {entry.comment}"
                records.append((identifier, entry.sequence or ''))
    except (OSError, ValueError) as e:
        raise ValueError(f"Failed to read FASTA file {fasta_file}: {e}") from e

    if not records and _has_content(fasta_file):
        raise ValueError(f"No FASTA records found in non-empty file: {fasta_file}")
    return records


def read_library(fasta_files):
    """Read every file of a library, concatenated in argument order."""
    check_input_files(fasta_files)

    records = []
    for fasta_file in fasta_files:
        file_records = read_fasta_records(fasta_file)
        log_print(f"Loaded {len(file_records)} sequences from {fasta_file}")
        records.extend(file_records)
    return records
