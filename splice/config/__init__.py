"""Configuration schemas and parsing."""
