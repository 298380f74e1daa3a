"""
Validation of probe library FASTA files for the probe design pipeline.
"""

__version__ = "0.1.0"
