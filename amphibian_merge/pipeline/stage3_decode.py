"""
Stage 3: Wide-to-Long Decoder

Turns the Redwood incomplete-records extract into one row per observed
species.

Operations (in order):
    1. Unpivot species columns into (record_id, scientific_name, oasr)
    2. Drop rows whose packed oasr value is absent
    3. Split oasr into occurrence, abundance, seasonality, record_status
    4. Turn the literal "NA" into an absent value in occurrence, abundance
       and record_status. seasonality keeps a literal "NA".
    5. Replace "." with " " in scientific_name (Genus.species -> Genus species)
"""

import logging
from typing import Optional

import pandas as pd

from amphibian_merge.config import DEFAULT_CONFIG, DecodeConfig, PipelineConfig
from amphibian_merge.pipeline.sources import dump_stage, load_source
from amphibian_merge.reshaping import (
    drop_absent,
    null_sentinel,
    replace_literal,
    split_packed,
    unpivot,
)

logger = logging.getLogger(__name__)


def decode_records(
    df: pd.DataFrame,
    cfg: Optional[DecodeConfig] = None,
    source: str = "records",
) -> pd.DataFrame:
    """
    Decode the wide records extract into long form.

    Raises:
        StructuralError: If the id column is missing or a packed value does
            not split into exactly four fields
    """
    cfg = cfg or DecodeConfig()

    long = unpivot(
        df,
        id_columns=[cfg.id_column],
        names_to=cfg.names_to,
        values_to=cfg.values_to,
        source=source,
    )
    long = drop_absent(long, cfg.values_to, source=source)
    long = split_packed(
        long,
        cfg.values_to,
        into=cfg.packed_fields,
        sep=cfg.packed_sep,
        source=source,
        id_column=cfg.id_column,
    )
    long = null_sentinel(long, cfg.na_columns, sentinel=cfg.na_sentinel, source=source)
    long = replace_literal(
        long,
        cfg.names_to,
        cfg.name_delimiter,
        cfg.name_replacement,
        source=source,
    )

    logger.info(
        f"{source}: decoded {len(long):,} observations of "
        f"{long[cfg.names_to].nunique()} species"
    )
    return long


def run_decode(cfg: PipelineConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Run the wide-to-long decoder stage.

    Returns:
        pd.DataFrame: Long-form records table
    """
    logger.info("=" * 60)
    logger.info("STAGE 3: WIDE-TO-LONG DECODER")
    logger.info("=" * 60)

    raw = load_source(cfg, "records")
    decoded = decode_records(raw, cfg.decode, source=cfg.sources.records)
    dump_stage(decoded, cfg, "stage3_records")
    return decoded
