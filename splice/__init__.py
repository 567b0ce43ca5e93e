"""Splice - transactional installer for approved multi-file code changes."""

__version__ = "0.1.0"
