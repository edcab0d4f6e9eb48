"""
Stage 2: Secondary-Source Normalizer

Brings the Acadia extract into the primary table's layout.

Operations:
    - Lowercase every column label
    - Fuse record and id into record_id ("<record>-<id>")
    - Fill order and family down from the previous row
"""

import logging
from typing import Optional

import pandas as pd

from amphibian_merge.config import DEFAULT_CONFIG, PipelineConfig, SecondaryConfig
from amphibian_merge.pipeline.sources import dump_stage, load_source
from amphibian_merge.reshaping import forward_fill, lowercase_columns, unite_columns
from amphibian_merge.schemas import require_columns

logger = logging.getLogger(__name__)


def normalize_secondary(
    df: pd.DataFrame,
    cfg: Optional[SecondaryConfig] = None,
    source: str = "secondary",
) -> pd.DataFrame:
    """
    Normalize the single-park extract.

    Output has the same number of rows as the input; the identifier columns
    are replaced by ``cfg.id_target`` and the fill columns are filled in place.
    """
    cfg = cfg or SecondaryConfig()

    out = lowercase_columns(df)
    require_columns(out, list(cfg.id_columns) + list(cfg.fill_columns), source)

    out = unite_columns(
        out,
        target=cfg.id_target,
        columns=cfg.id_columns,
        sep=cfg.id_sep,
        source=source,
    )
    out = forward_fill(out, cfg.fill_columns, source=source)

    logger.info(f"{source}: normalized {len(out):,} rows, {len(out.columns)} columns")
    return out


def run_normalize(cfg: PipelineConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Run the secondary-source normalizer stage.

    Returns:
        pd.DataFrame: Normalized secondary table
    """
    logger.info("=" * 60)
    logger.info("STAGE 2: SECONDARY-SOURCE NORMALIZER")
    logger.info("=" * 60)

    raw = load_source(cfg, "secondary", check=False)
    normalized = normalize_secondary(raw, cfg.secondary, source=cfg.sources.secondary)
    dump_stage(normalized, cfg, "stage2_secondary")
    return normalized
