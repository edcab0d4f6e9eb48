"""
Stage 1: Primary-Source Filter

Loads the main biodiversity table and keeps only approved amphibian
records.

Operations:
    - Load data.txt
    - Keep rows with category == "Amphibian" and record_status == "Approved"
"""

import logging
from typing import Optional

import pandas as pd

from amphibian_merge.config import DEFAULT_CONFIG, FilterConfig, PipelineConfig
from amphibian_merge.pipeline.sources import dump_stage, load_source
from amphibian_merge.reshaping import filter_equals

logger = logging.getLogger(__name__)


def filter_primary(
    df: pd.DataFrame,
    cfg: Optional[FilterConfig] = None,
    source: str = "primary",
) -> pd.DataFrame:
    """
    Keep approved amphibian records.

    Both comparisons are exact and case-sensitive. Columns are unchanged.
    """
    cfg = cfg or FilterConfig()
    out = filter_equals(
        df,
        {"category": cfg.category, "record_status": cfg.record_status},
        source=source,
    )
    logger.info(
        f"{source}: kept {len(out):,} of {len(df):,} rows "
        f"(category={cfg.category!r}, record_status={cfg.record_status!r})"
    )
    return out


def run_filter(cfg: PipelineConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Run the primary-source filter stage.

    Returns:
        pd.DataFrame: Filtered primary table
    """
    logger.info("=" * 60)
    logger.info("STAGE 1: PRIMARY-SOURCE FILTER")
    logger.info("=" * 60)

    raw = load_source(cfg, "primary")
    filtered = filter_primary(raw, cfg.filter, source=cfg.sources.primary)
    dump_stage(filtered, cfg, "stage1_primary")
    return filtered
