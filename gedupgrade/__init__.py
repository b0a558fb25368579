"""Convert GEDCOM 5.5.1 genealogy files to GEDCOM 7.0."""

__version__ = "0.1.0"