"""
Stage 5: Write Output

Serializes the merged table to a tab-delimited flat file: one header row,
one row per record, no index column, columns in table order. An existing
file at the output path is replaced.
"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from amphibian_merge.config import DEFAULT_CONFIG, OutputConfig, PipelineConfig
from amphibian_merge.utils.io import write_delimited

logger = logging.getLogger(__name__)


def write_output(
    df: pd.DataFrame,
    path: Path,
    cfg: Optional[OutputConfig] = None,
) -> Path:
    """Write the final artifact to *path*."""
    cfg = cfg or OutputConfig()
    return write_delimited(df, path, sep=cfg.sep, na_rep=cfg.na_rep)


def run_output(
    merged: pd.DataFrame,
    cfg: PipelineConfig = DEFAULT_CONFIG,
    output_path: Optional[Path] = None,
) -> Path:
    """
    Run the output stage.

    Returns:
        Path: Location of the written artifact
    """
    logger.info("=" * 60)
    logger.info("STAGE 5: WRITE OUTPUT")
    logger.info("=" * 60)

    path = Path(output_path) if output_path else cfg.output_path
    write_output(merged, path, cfg.output)
    logger.info(f"Wrote {len(merged):,} rows → {path}")
    return path
