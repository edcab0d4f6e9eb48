"""
Amphibian Merge Pipeline - National Park Amphibian Synthesis.

Reconciles inconsistently structured biodiversity extracts from several
national parks and merges them into one tab-delimited observation table.

Public API
----------
Core configuration:
    PROJECT_ROOT, RAW_DIR, STAGING_DIR, FINAL_DIR, REPORTS_DIR
    PipelineConfig, load_config, save_config

Schemas:
    SourceSchema, StructuralError, source_schemas

Pipeline:
    run_full_pipeline, filter_primary, normalize_secondary,
    decode_records, merge_sources

Reports:
    render_site_reports
"""

__version__ = "0.3.0"


# Re-export core configuration
from .config import (
    PROJECT_ROOT,
    RAW_DIR,
    STAGING_DIR,
    FINAL_DIR,
    REPORTS_DIR,
    PipelineConfig,
    load_config,
    save_config,
)

# Re-export schema descriptors
from .schemas import SourceSchema, StructuralError, source_schemas

# Re-export pipeline stages
from .pipeline import (
    run_full_pipeline,
    filter_primary,
    normalize_secondary,
    decode_records,
    merge_sources,
)


def render_site_reports(*args, **kwargs):
    """Render per-site HTML reports. See amphibian_merge.reports for details."""
    from .reports.site_report import render_site_reports as _render
    return _render(*args, **kwargs)


__all__ = [
    # Version
    "__version__",
    # Configuration
    "PROJECT_ROOT",
    "RAW_DIR",
    "STAGING_DIR",
    "FINAL_DIR",
    "REPORTS_DIR",
    "PipelineConfig",
    "load_config",
    "save_config",
    # Schemas
    "SourceSchema",
    "StructuralError",
    "source_schemas",
    # Pipeline
    "run_full_pipeline",
    "filter_primary",
    "normalize_secondary",
    "decode_records",
    "merge_sources",
    # Reports
    "render_site_reports",
]
