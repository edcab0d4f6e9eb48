"""
Data validation functions for the merged observation table.

These checks never stop a run. They surface the known weak spots of the
merge: repeated record ids, lookup keys that find no match, columns shared
by two joined tables but not declared as keys, and leftover "NA" text.
"""

import pandas as pd
from typing import Optional, Dict, List, Any, Sequence
from dataclasses import dataclass
import logging

from amphibian_merge.config import DEFAULT_CONFIG, PipelineConfig
from amphibian_merge.reshaping.joins import shared_columns

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation check."""
    check_name: str
    passed: bool
    message: str
    affected_count: int = 0
    affected_fraction: float = 0.0
    details: Optional[Dict[str, Any]] = None


def _fraction(count: int, total: int) -> float:
    return count / total if total > 0 else 0.0


def check_key_uniqueness(
    df: pd.DataFrame,
    keys: Sequence[str],
    name: str,
) -> ValidationResult:
    """Rows sharing the same values in *keys*."""
    keys = list(keys)
    check_name = f"{name}_{'_'.join(keys)}_uniqueness"
    if any(k not in df.columns for k in keys):
        return ValidationResult(
            check_name=check_name,
            passed=True,
            message=f"{name} has no {keys} column(s); skipped",
        )
    duplicates = int(df.duplicated(subset=keys).sum())
    return ValidationResult(
        check_name=check_name,
        passed=(duplicates == 0),
        message=f"{duplicates} duplicate {keys} values in {name}",
        affected_count=duplicates,
        affected_fraction=_fraction(duplicates, len(df)),
    )


def check_cross_source_ids(
    tables: Dict[str, pd.DataFrame],
    id_column: str = "record_id",
) -> ValidationResult:
    """Identifiers that appear in more than one source table."""
    seen: Dict[str, List[str]] = {}
    for name, df in tables.items():
        if id_column not in df.columns:
            continue
        for value in df[id_column].dropna().unique():
            seen.setdefault(value, []).append(name)

    shared = {k: v for k, v in seen.items() if len(v) > 1}
    return ValidationResult(
        check_name=f"cross_source_{id_column}",
        passed=(len(shared) == 0),
        message=f"{len(shared)} {id_column} values appear in more than one source",
        affected_count=len(shared),
        affected_fraction=_fraction(len(shared), len(seen)),
        details={"examples": dict(list(shared.items())[:10])} if shared else None,
    )


def check_join_coverage(
    left: pd.DataFrame,
    right: pd.DataFrame,
    keys: Sequence[str],
    name: str,
) -> ValidationResult:
    """Left rows whose key values have no match in *right*."""
    keys = list(keys)
    check_name = f"{name}_join_coverage"
    if any(k not in left.columns or k not in right.columns for k in keys):
        return ValidationResult(
            check_name=check_name,
            passed=False,
            message=f"join keys {keys} missing from one side",
        )

    lookup = right[keys].drop_duplicates()
    flagged = left[keys].merge(lookup, how="left", on=keys, indicator=True)
    unmatched = flagged["_merge"] == "left_only"
    n_unmatched = int(unmatched.sum())
    examples = (
        flagged.loc[unmatched, keys].drop_duplicates().head(10).to_dict("records")
    )
    return ValidationResult(
        check_name=check_name,
        passed=(n_unmatched == 0),
        message=f"{n_unmatched} of {len(left)} rows found no match on {keys}",
        affected_count=n_unmatched,
        affected_fraction=_fraction(n_unmatched, len(left)),
        details={"unmatched_keys": examples} if examples else None,
    )


def check_undeclared_shared(
    left: pd.DataFrame,
    right: pd.DataFrame,
    keys: Sequence[str],
    name: str,
) -> ValidationResult:
    """Columns both tables carry that are not declared join keys."""
    extra = [c for c in shared_columns(left, right) if c not in keys]
    return ValidationResult(
        check_name=f"{name}_undeclared_shared_columns",
        passed=(len(extra) == 0),
        message=(
            f"shared non-key columns {extra}; left values kept"
            if extra else "no shared non-key columns"
        ),
        affected_count=len(extra),
        details={"columns": extra} if extra else None,
    )


def check_sentinel(
    df: pd.DataFrame,
    columns: Sequence[str],
    sentinel: str,
    name: str,
) -> ValidationResult:
    """Cells still holding the literal missing marker."""
    present = [c for c in columns if c in df.columns]
    counts = {c: int((df[c] == sentinel).sum()) for c in present}
    total = sum(counts.values())
    return ValidationResult(
        check_name=f"{name}_no_{sentinel.lower()}_text",
        passed=(total == 0),
        message=f"{total} cells equal to {sentinel!r} in {present}",
        affected_count=total,
        affected_fraction=_fraction(total, len(df) * len(present)),
        details=counts if total else None,
    )


def validate_merge(
    primary: pd.DataFrame,
    secondary: pd.DataFrame,
    records: pd.DataFrame,
    species: pd.DataFrame,
    parks: pd.DataFrame,
    observations: pd.DataFrame,
    cfg: PipelineConfig = DEFAULT_CONFIG,
) -> List[ValidationResult]:
    """
    Validate the merge inputs and the stacked observations.

    *observations* is the stacked table before parks are joined on, so
    repeated park keys do not inflate the park coverage counts.

    Checks:
    - record_id uniqueness within primary and secondary
    - (record_id, scientific_name) uniqueness within decoded records
    - record_id values shared across sources
    - species and park join coverage
    - shared columns not declared as join keys
    - leftover "NA" text in normalized status columns

    Returns:
        List of ValidationResult objects
    """
    dec = cfg.decode
    keys = cfg.merge

    results = [
        check_key_uniqueness(primary, [dec.id_column], "primary"),
        check_key_uniqueness(secondary, [cfg.secondary.id_target], "secondary"),
        check_key_uniqueness(records, [dec.id_column, dec.names_to], "records"),
        check_cross_source_ids(
            {"secondary": secondary, "primary": primary, "records": records},
            id_column=dec.id_column,
        ),
        check_join_coverage(records, species, keys.species_keys, "species"),
        check_undeclared_shared(records, species, keys.species_keys, "species"),
        check_join_coverage(observations, parks, keys.park_keys, "parks"),
        check_undeclared_shared(observations, parks, keys.park_keys, "parks"),
        check_sentinel(records, dec.na_columns, dec.na_sentinel, "records"),
    ]

    for r in results:
        if not r.passed:
            logger.warning(f"QA check failed: {r.check_name}: {r.message}")
    return results
