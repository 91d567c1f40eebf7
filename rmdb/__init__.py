"""Paged disk files, catalog metadata, result tables and transaction records for a small relational database."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "defs",
    "page",
    "disk_manager",
    "record_printer",
    "sm_meta",
    "transaction",
]