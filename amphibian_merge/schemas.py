"""
Source schema descriptors and structural validation.

Each extract has a descriptor enumerating the columns the pipeline reads
from it and the columns it is keyed by. Descriptors are derived from the
pipeline configuration so renamed columns stay in one place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

import pandas as pd

from amphibian_merge.config import DEFAULT_CONFIG, PipelineConfig

logger = logging.getLogger(__name__)


class StructuralError(ValueError):
    """Input does not have the shape the pipeline needs to merge it."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        column: Optional[str] = None,
        value: Optional[str] = None,
    ):
        self.source = source
        self.column = column
        self.value = value
        super().__init__(message)


@dataclass(frozen=True)
class SourceSchema:
    """Columns a source must provide."""
    name: str
    required: Tuple[str, ...]
    key: Tuple[str, ...] = ()

    @property
    def columns(self) -> Tuple[str, ...]:
        # required first, then keys not already listed
        return self.required + tuple(k for k in self.key if k not in self.required)


def source_schemas(cfg: PipelineConfig = DEFAULT_CONFIG) -> Dict[str, SourceSchema]:
    """Build the descriptor for every source from the pipeline config."""
    sec = cfg.secondary
    dec = cfg.decode
    return {
        "primary": SourceSchema(
            name=cfg.sources.primary,
            required=("category", "record_status"),
        ),
        # Labels after lowercasing
        "secondary": SourceSchema(
            name=cfg.sources.secondary,
            required=tuple(sec.id_columns) + tuple(sec.fill_columns),
        ),
        "records": SourceSchema(
            name=cfg.sources.records,
            required=(dec.id_column,),
            key=(dec.id_column,),
        ),
        "species": SourceSchema(
            name=cfg.sources.species,
            required=(),
            key=tuple(cfg.merge.species_keys),
        ),
        "parks": SourceSchema(
            name=cfg.sources.parks,
            required=(),
            key=tuple(cfg.merge.park_keys),
        ),
    }


def require_columns(
    df: pd.DataFrame,
    columns: Iterable[str],
    source: str,
) -> None:
    """Raise StructuralError if any of *columns* is missing from *df*."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise StructuralError(
            f"{source} is missing required column(s) {missing}; "
            f"found {list(df.columns)}",
            source=source,
            column=missing[0],
        )


def check_schema(df: pd.DataFrame, schema: SourceSchema) -> pd.DataFrame:
    """Validate *df* against *schema* and return it unchanged."""
    require_columns(df, schema.columns, schema.name)
    logger.debug(f"{schema.name}: schema check passed ({len(schema.columns)} columns)")
    return df
