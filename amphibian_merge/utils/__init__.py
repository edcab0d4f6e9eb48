"""Shared utilities for the Amphibian Merge pipeline."""

from .io import (
    ensure_dir,
    read_delimited,
    write_delimited,
    save_parquet,
)

__all__ = [
    "ensure_dir",
    "read_delimited",
    "write_delimited",
    "save_parquet",
]
