"""Replace PII columns in CSV / Excel tables with SHA-256 digests."""

__version__ = "0.1.0"
