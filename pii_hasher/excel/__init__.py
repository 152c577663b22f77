"""Parsing, validation and serialization of CSV / Excel files."""
