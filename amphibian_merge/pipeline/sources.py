"""
Source loading shared by the pipeline stages.

Each extract is read once per run, checked against its schema descriptor
and, when staging dumps are enabled, intermediate tables are written to
the staging directory as parquet for inspection.
"""

import logging
from pathlib import Path

import pandas as pd

from amphibian_merge.config import PipelineConfig
from amphibian_merge.schemas import check_schema, source_schemas
from amphibian_merge.utils.io import read_delimited, save_parquet

logger = logging.getLogger(__name__)


def load_source(cfg: PipelineConfig, source: str, check: bool = True) -> pd.DataFrame:
    """
    Read one extract and validate it against its schema.

    Args:
        cfg: Pipeline configuration
        source: One of primary, secondary, records, species, parks
        check: Skip the schema check when the stage validates after its own
            relabelling (the secondary extract is checked after lowercasing)

    Returns:
        The extract with every column as text
    """
    df = read_delimited(cfg.source_path(source), sep=cfg.sources.sep)
    if check:
        check_schema(df, source_schemas(cfg)[source])
    return df


def dump_stage(df: pd.DataFrame, cfg: PipelineConfig, name: str) -> None:
    """Write an intermediate table to staging when enabled."""
    if not cfg.dump_staging:
        return
    save_parquet(df, Path(cfg.staging_dir) / f"{name}.parquet")
