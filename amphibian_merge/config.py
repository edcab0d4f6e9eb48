"""
Global configuration for the Amphibian Merge Pipeline.

Implements project conventions for:
- File paths and source file names
- Filter literals for the primary biodiversity table
- Identifier, fill and packed-field rules for the park extracts
- Declared join keys
- Output and report settings

Every field has a default so the pipeline works out of the box; a JSON
file can override any subset of them (see ``load_config``).
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
RAW_DIR = DATA_DIR / "raw"
STAGING_DIR = DATA_DIR / "staging"
FINAL_DIR = DATA_DIR / "final"
REPORTS_DIR = PROJECT_ROOT / "reports"

# =============================================================================
# SOURCE FILES
# =============================================================================

@dataclass
class SourceFiles:
    """File names of the five extracts, relative to ``raw_dir``."""

    primary: str = "data.txt"
    secondary: str = "ACAD.txt"
    records: str = "REDW_records.txt"
    species: str = "REDW_species.txt"
    parks: str = "parks_updated.txt"

    # Delimiter shared by every extract
    sep: str = "\t"


# =============================================================================
# STAGE CONFIGURATION
# =============================================================================

@dataclass
class FilterConfig:
    """Row filter applied to the primary biodiversity table."""

    category: str = "Amphibian"
    record_status: str = "Approved"


@dataclass
class SecondaryConfig:
    """Normalization rules for the single-park extract."""

    # Columns fused into record_id (labels after lowercasing)
    id_columns: List[str] = field(default_factory=lambda: ["record", "id"])
    id_target: str = "record_id"
    id_sep: str = "-"

    # Taxonomic columns filled down in row order
    fill_columns: List[str] = field(default_factory=lambda: ["order", "family"])


@dataclass
class DecodeConfig:
    """Rules for turning the wide records extract into long form."""

    id_column: str = "record_id"
    names_to: str = "scientific_name"
    values_to: str = "oasr"

    # Packed value layout: occurrence-abundance-seasonality-record_status
    packed_fields: Tuple[str, ...] = (
        "occurrence",
        "abundance",
        "seasonality",
        "record_status",
    )
    packed_sep: str = "-"

    # Literal used in the raw extract for "no value". seasonality is
    # intentionally not listed.
    na_sentinel: str = "NA"
    na_columns: List[str] = field(
        default_factory=lambda: ["occurrence", "abundance", "record_status"]
    )

    # Scientific names arrive as Genus.species
    name_delimiter: str = "."
    name_replacement: str = " "


@dataclass
class MergeConfig:
    """Declared join keys for the two enrichment joins."""

    species_keys: List[str] = field(default_factory=lambda: ["scientific_name"])
    park_keys: List[str] = field(default_factory=lambda: ["park_code"])


@dataclass
class OutputConfig:
    """Final artifact settings."""

    filename: str = "working_data.txt"
    sep: str = "\t"
    na_rep: str = "NA"


@dataclass
class ReportConfig:
    """Per-site HTML report settings."""

    sites: List[str] = field(default_factory=lambda: ["A", "B", "C", "D", "E"])
    site_column: str = "site"
    filename_pattern: str = "report_site{site}.html"
    title: str = "Amphibian Observations"
    max_rows: int = 200


# =============================================================================
# PIPELINE CONFIGURATION
# =============================================================================

_SECTIONS = {
    "sources": SourceFiles,
    "filter": FilterConfig,
    "secondary": SecondaryConfig,
    "decode": DecodeConfig,
    "merge": MergeConfig,
    "output": OutputConfig,
    "report": ReportConfig,
}


@dataclass
class PipelineConfig:
    """All pipeline parameters in one place."""

    sources: SourceFiles = field(default_factory=SourceFiles)
    filter: FilterConfig = field(default_factory=FilterConfig)
    secondary: SecondaryConfig = field(default_factory=SecondaryConfig)
    decode: DecodeConfig = field(default_factory=DecodeConfig)
    merge: MergeConfig = field(default_factory=MergeConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    # ── I/O paths ───────────────────────────────────────────────────────
    raw_dir: str = str(RAW_DIR)
    final_dir: str = str(FINAL_DIR)
    staging_dir: str = str(STAGING_DIR)
    reports_dir: str = str(REPORTS_DIR)

    # Write each stage's table to staging_dir as parquet
    dump_staging: bool = False

    # ── helpers ──────────────────────────────────────────────────────────

    def source_path(self, source: str) -> Path:
        return Path(self.raw_dir) / getattr(self.sources, source)

    @property
    def output_path(self) -> Path:
        return Path(self.final_dir) / self.output.filename


def _build_section(cls, data: dict):
    known = {f.name for f in fields(cls)}
    filtered = {k: v for k, v in data.items() if k in known}
    if "packed_fields" in filtered:
        filtered["packed_fields"] = tuple(filtered["packed_fields"])
    return cls(**filtered), len(filtered)


def load_config(path: Optional[str | Path] = None) -> PipelineConfig:
    """Load config from JSON, falling back to defaults for missing keys."""
    if path is None:
        logger.info("No config path supplied - using all defaults.")
        return PipelineConfig()
    path = Path(path)
    if not path.exists():
        logger.warning("Config file %s not found - using defaults.", path)
        return PipelineConfig()
    with open(path) as f:
        data = json.load(f)

    kwargs = {}
    n_overrides = 0
    for name, cls in _SECTIONS.items():
        if isinstance(data.get(name), dict):
            kwargs[name], n = _build_section(cls, data[name])
            n_overrides += n
    for name in ("raw_dir", "final_dir", "staging_dir", "reports_dir", "dump_staging"):
        if name in data:
            kwargs[name] = data[name]
            n_overrides += 1

    cfg = PipelineConfig(**kwargs)
    logger.info("Loaded config from %s (%d overrides).", path, n_overrides)
    return cfg


def save_config(cfg: PipelineConfig, path: str | Path) -> None:
    """Serialise the current config to JSON for reproducibility."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(asdict(cfg), f, indent=2, default=str)
    logger.info("Saved config to %s.", path)


DEFAULT_CONFIG = PipelineConfig()
