#!/usr/bin/env python3
"""
Validate a probe library before probe design.

Requirements:
- Input files must exist and have a .fa/.fasta extension
- No duplicate ids
- No duplicate sequences
- No sequence whose reverse complement is also in the library
- Sequence lengths within (max_length - 100, max_length]
- Sequences only contain A/C/G/T (any case)
- Ids follow (FREETEXT_)?SHORTID_(REF|ALT_<n>), strict ids are unique,
  and each short id has exactly one REF and at least one ALT

Exit status is 0 when every check passes, 1 when any record is flagged and
2 on a fatal error (missing file, bad extension, missing max length,
unsupported identifier mode).
"""

import argparse
import logging
import sys
from pathlib import Path

from probe_library.id_format import check_id_format
from probe_library.identifiers import check_ref_alt_mode, decompose_identifiers
from probe_library.pipeline_utils import add_log_file, load_config, log_print, logger, read_library
from probe_library.record_table import build_record_table
from probe_library.sequence_checks import (
    check_id_unique,
    check_revcompl_unique,
    check_seq_length,
    check_seq_standard,
    check_seq_unique,
    validate_max_length,
)
from probe_library.summary import failing_records, format_summary, overall_status, report_table, summarize

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FATAL = 2

DEFAULT_SETTINGS = {
    'max_length': None,
    'ref_alt': True,
    'output': None,
    'log': None,
    'quiet': False,
    'log_level': 'INFO',
}


def validate_records(df, max_length, ref_alt=True):
    """Run every check on a record table.

    Parameters
    ----------
    df : pd.DataFrame
        Record table with `id` and `seq` columns
    max_length : int
        Maximum allowed sequence length
    ref_alt : bool
        Identifier grammar mode; only REF/ALT is implemented

    Returns
    -------
    pd.DataFrame
        Copy of df with derived id fields and all annotation columns
    """
    check_ref_alt_mode(ref_alt)
    validate_max_length(max_length)

    annotated = decompose_identifiers(df, ref_alt=ref_alt)
    annotated = check_id_unique(annotated)
    annotated = check_revcompl_unique(annotated)
    annotated = check_seq_unique(annotated)
    annotated = check_seq_length(annotated, max_length)
    annotated = check_seq_standard(annotated)
    annotated = check_id_format(annotated, ref_alt=ref_alt)
    return annotated


def validate_library(fasta_files, max_length, ref_alt=True):
    """Validate a library made of one or more FASTA files.

    Configuration is checked before any file is read.

    Returns
    -------
    tuple
        (annotated table, summary dict, overall status)
    """
    check_ref_alt_mode(ref_alt)
    validate_max_length(max_length)

    records = read_library(fasta_files)
    if not records:
        logger.warning("No sequences found in the library")

    annotated = validate_records(build_record_table(records), max_length, ref_alt=ref_alt)
    return annotated, summarize(annotated), overall_status(annotated)


def resolve_settings(args, config=None):
    """Merge command-line arguments over config file values.

    Command-line values win wherever they were given.
    """
    settings = dict(DEFAULT_SETTINGS)
    for key, value in (config or {}).items():
        if key in settings:
            settings[key] = value
        else:
            logger.warning(f"Ignoring unknown config key: {key}")

    for key in settings:
        value = getattr(args, key, None)
        if value is not None:
            settings[key] = value

    max_length = settings['max_length']
    if isinstance(max_length, str) and max_length.strip().isdigit():
        max_length = int(max_length)
    settings['max_length'] = validate_max_length(max_length)
    for key in ('ref_alt', 'quiet'):
        if not isinstance(settings[key], bool):
            raise ValueError(f"{key} must be true or false, got {settings[key]!r}")
    return settings


def write_outputs(annotated, summary, settings):
    """Write the summary to stdout/log file and the detailed table to a TSV."""
    summary_text = format_summary(summary)

    if not settings['quiet']:
        print(summary_text)

    if settings['log']:
        log_path = Path(settings['log'])
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, 'a') as f:
            f.write(summary_text + "\n")

    if settings['output']:
        output_path = Path(settings['output'])
        output_path.parent.mkdir(parents=True, exist_ok=True)
        report_table(annotated).to_csv(output_path, sep='\t', index=False, na_rep='')
        log_print(f"Saved detailed report to {output_path}")


def build_parser():
    parser = argparse.ArgumentParser(description='Validate a probe library (FASTA) for probe design')
    parser.add_argument('fasta_files', nargs='+', help='FASTA file(s) forming one library (.fa/.fasta)')
    parser.add_argument('-l', '--max-length', dest='max_length', type=int,
                        help='Maximum sequence length; sequences must be longer than max-length - 100')
    parser.add_argument('--synthetic', dest='ref_alt', action='store_false', default=None,
                        help='Validate synthetic (non REF/ALT) identifiers (not supported)')
    parser.add_argument('-o', '--output', help='Output TSV file with per-sequence results')
    parser.add_argument('--log', help='Log file; receives log messages and the summary')
    parser.add_argument('-q', '--quiet', action='store_true', default=None,
                        help='Do not print the summary to stdout')
    parser.add_argument('--config', help='YAML config file with default settings')
    parser.add_argument('--log-level', dest='log_level', help='Logging level (default: INFO)')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    log_handler = None
    try:
        config = load_config(args.config) if args.config else {}
        settings = resolve_settings(args, config)

        logging.basicConfig(
            level=getattr(logging, str(settings['log_level']).upper(), logging.INFO),
            format='%(asctime)s - %(levelname)s - %(message)s'
        )
        if settings['log']:
            log_handler = add_log_file(settings['log'])

        annotated, summary, status = validate_library(
            args.fasta_files, settings['max_length'], ref_alt=settings['ref_alt']
        )
    except (ValueError, FileNotFoundError, NotImplementedError) as e:
        print(f"ERROR: Library validation failed: {e}", file=sys.stderr)
        if log_handler is not None:
            logging.getLogger().removeHandler(log_handler)
            log_handler.close()
        return EXIT_FATAL

    try:
        write_outputs(annotated, summary, settings)

        if status == EXIT_OK:
            log_print(f"✓ Library validation passed: {summary['n_sequences']} sequences")
        else:
            failed = failing_records(annotated)
            logger.warning(f"Library validation found problems in {len(failed)} of {len(annotated)} sequences")
            for identifier in failed['id'].head(10):
                logger.warning(f"  flagged: {identifier}")
            if len(failed) > 10:
                logger.warning(f"  ... and {len(failed) - 10} more")
    finally:
        if log_handler is not None:
            logging.getLogger().removeHandler(log_handler)
            log_handler.close()

    return status


if __name__ == '__main__':
    sys.exit(main())
