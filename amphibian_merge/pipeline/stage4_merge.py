"""
Stage 4: Relational Merger

Combines the three observation tables and enriches them.

Operations:
    - Join REDW_species onto the decoded Redwood records (species keys)
    - Stack Acadia, primary and enriched Redwood rows, in that order
      (stack_observations)
    - Join parks_updated onto the stacked table by park keys (join_parks)

Join keys are declared in MergeConfig. Rows whose keys find no match keep
absent values in the joined columns; the run does not stop for them.
"""

import logging
from typing import Optional

import pandas as pd

from amphibian_merge.config import DEFAULT_CONFIG, MergeConfig, PipelineConfig
from amphibian_merge.pipeline.sources import dump_stage, load_source
from amphibian_merge.reshaping import left_join, stack_tables

logger = logging.getLogger(__name__)


def enrich_records(
    records: pd.DataFrame,
    species: pd.DataFrame,
    cfg: Optional[MergeConfig] = None,
) -> pd.DataFrame:
    """Attach species attributes to the decoded records."""
    cfg = cfg or MergeConfig()
    return left_join(
        records,
        species,
        on=cfg.species_keys,
        left_name="records",
        right_name="species",
    )


def stack_observations(
    primary: pd.DataFrame,
    secondary: pd.DataFrame,
    records: pd.DataFrame,
    species: pd.DataFrame,
    cfg: Optional[MergeConfig] = None,
) -> pd.DataFrame:
    """
    Enrich the decoded records and stack all observation rows.

    Rows come in the order secondary, primary, enriched records; columns are
    the union of the three schemas in order of first appearance.
    """
    cfg = cfg or MergeConfig()
    enriched = enrich_records(records, species, cfg)
    return stack_tables([secondary, primary, enriched])


def join_parks(
    observations: pd.DataFrame,
    parks: pd.DataFrame,
    cfg: Optional[MergeConfig] = None,
) -> pd.DataFrame:
    """Attach park attributes to the stacked observations."""
    cfg = cfg or MergeConfig()
    complete = left_join(
        observations,
        parks,
        on=cfg.park_keys,
        left_name="observations",
        right_name="parks",
    )
    if "park_name" in complete.columns:
        logger.info(f"Merged table covers {complete['park_name'].nunique()} parks")
    return complete


def merge_sources(
    primary: pd.DataFrame,
    secondary: pd.DataFrame,
    records: pd.DataFrame,
    species: pd.DataFrame,
    parks: pd.DataFrame,
    cfg: Optional[MergeConfig] = None,
) -> pd.DataFrame:
    """
    Build the combined observation table.

    Args:
        primary: Filtered primary table (stage 1)
        secondary: Normalized secondary table (stage 2)
        records: Decoded records table (stage 3)
        species: Species attribute table
        parks: Park metadata table
        cfg: Declared join keys

    Returns:
        Stacked and enriched table. Row count is the stacked row count,
        larger only if a key matches several rows of a lookup table.
    """
    observations = stack_observations(primary, secondary, records, species, cfg)
    return join_parks(observations, parks, cfg)


def run_merge(
    primary: pd.DataFrame,
    secondary: pd.DataFrame,
    records: pd.DataFrame,
    cfg: PipelineConfig = DEFAULT_CONFIG,
    species: Optional[pd.DataFrame] = None,
    parks: Optional[pd.DataFrame] = None,
    observations: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """
    Run the relational merger stage.

    Merges the outputs of stages 1-3 with the species and park lookup
    tables, loading either lookup table that is not passed in. When the
    stacked table from ``stack_observations`` is passed as *observations*,
    only the park join is run.

    Returns:
        pd.DataFrame: Complete merged table
    """
    logger.info("=" * 60)
    logger.info("STAGE 4: RELATIONAL MERGER")
    logger.info("=" * 60)

    if observations is None:
        if species is None:
            species = load_source(cfg, "species")
        observations = stack_observations(primary, secondary, records, species, cfg.merge)
    if parks is None:
        parks = load_source(cfg, "parks")
    merged = join_parks(observations, parks, cfg.merge)
    logger.info(f"Merged table: {len(merged):,} rows, {len(merged.columns)} columns")
    dump_stage(merged, cfg, "stage4_merged")
    return merged
