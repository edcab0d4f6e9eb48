"""
Amphibian Merge Pipeline - 5-Stage Architecture

The pipeline is organized into 5 sequential stages:
    1. FILTER    - Keep approved amphibian rows of the primary table
    2. NORMALIZE - Lowercase, fuse identifiers and fill taxonomy (Acadia)
    3. DECODE    - Unpivot and decode the Redwood records
    4. MERGE     - Join species and park details, stack all observations
    5. OUTPUT    - Write the tab-delimited artifact

Usage:
    from amphibian_merge.pipeline import run_full_pipeline
    run_full_pipeline()

Or run individual stages:
    from amphibian_merge.pipeline import run_filter, run_normalize, run_decode
    primary = run_filter()
    secondary = run_normalize()
    records = run_decode()
    merged = run_merge(primary, secondary, records)
    run_output(merged)
"""

from .stage1_filter import run_filter, filter_primary
from .stage2_normalize import run_normalize, normalize_secondary
from .stage3_decode import run_decode, decode_records
from .stage4_merge import (
    run_merge,
    merge_sources,
    enrich_records,
    stack_observations,
    join_parks,
)
from .stage5_output import run_output, write_output
from .runner import run_full_pipeline, run_quality_checks

__all__ = [
    'run_filter',
    'run_normalize',
    'run_decode',
    'run_merge',
    'run_output',
    'run_full_pipeline',
    'run_quality_checks',
    'filter_primary',
    'normalize_secondary',
    'decode_records',
    'merge_sources',
    'enrich_records',
    'stack_observations',
    'join_parks',
    'write_output',
]
