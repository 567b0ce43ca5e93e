"""Command line interface for Splice."""
