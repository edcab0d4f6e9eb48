"""
Column-level reshaping utilities.

Every function takes a DataFrame and returns a new one; inputs are never
modified in place. Row order is preserved and the result always carries a
fresh RangeIndex, so position-dependent steps (forward fill) see rows in
file order.
"""

import logging
from typing import Sequence

import pandas as pd

from amphibian_merge.schemas import StructuralError, require_columns

logger = logging.getLogger(__name__)


def lowercase_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename every column label to its lowercase form.

    Labels that collide after lowering are left as duplicates.
    """
    out = df.rename(columns=lambda c: str(c).lower())
    if out.columns.duplicated().any():
        dupes = out.columns[out.columns.duplicated()].tolist()
        logger.warning(f"Lowercasing produced duplicate column labels: {dupes}")
    return out.reset_index(drop=True)


def unite_columns(
    df: pd.DataFrame,
    target: str,
    columns: Sequence[str],
    sep: str = "-",
    na_text: str = "NA",
    source: str = "table",
) -> pd.DataFrame:
    """
    Fuse several columns into one text column, replacing them.

    The new column takes the position of the first source column. Absent
    components are written as *na_text*.

    Args:
        df: Input table
        target: Name of the new column
        columns: Columns to concatenate, in order
        sep: Separator placed between components
        na_text: Text used for absent components
        source: Source name used in error messages

    Returns:
        Table with *columns* replaced by *target*

    Example:
        >>> unite_columns(pd.DataFrame({"record": ["R1"], "id": ["7"]}),
        ...               "record_id", ["record", "id"])
          record_id
        0      R1-7
    """
    columns = list(columns)
    require_columns(df, columns, source)
    if target in df.columns and target not in columns:
        raise StructuralError(
            f"{source} already has a '{target}' column; cannot unite {columns} into it",
            source=source,
            column=target,
        )

    n_absent = int(df[columns].isna().any(axis=1).sum())
    if n_absent:
        logger.warning(
            f"{source}: {n_absent} rows have an absent component in {columns}; "
            f"written as '{na_text}'"
        )

    combined = df[columns[0]].fillna(na_text).astype(str)
    for col in columns[1:]:
        combined = combined + sep + df[col].fillna(na_text).astype(str)

    position = min(df.columns.get_loc(c) for c in columns)
    out = df.drop(columns=columns).reset_index(drop=True)
    out.insert(position, target, combined.to_numpy())
    return out


def forward_fill(
    df: pd.DataFrame,
    columns: Sequence[str],
    source: str = "table",
) -> pd.DataFrame:
    """
    Replace absent values with the nearest preceding value in row order.

    A leading run of absent values stays absent; present values are never
    overwritten.
    """
    columns = list(columns)
    require_columns(df, columns, source)

    out = df.reset_index(drop=True)
    n_before = int(out[columns].isna().sum().sum())
    out[columns] = out[columns].ffill()
    n_after = int(out[columns].isna().sum().sum())
    logger.info(f"{source}: filled {n_before - n_after} absent values in {columns}")
    return out


def null_sentinel(
    df: pd.DataFrame,
    columns: Sequence[str],
    sentinel: str = "NA",
    source: str = "table",
) -> pd.DataFrame:
    """Turn cells equal to the literal *sentinel* into absent values."""
    columns = list(columns)
    require_columns(df, columns, source)

    out = df.reset_index(drop=True)
    for col in columns:
        hits = out[col] == sentinel
        if hits.any():
            logger.debug(f"{source}: {int(hits.sum())} '{sentinel}' values in {col}")
        out[col] = out[col].where(~hits)
    return out


def replace_literal(
    df: pd.DataFrame,
    column: str,
    old: str,
    new: str,
    source: str = "table",
) -> pd.DataFrame:
    """Replace every occurrence of the literal *old* with *new* in *column*."""
    require_columns(df, [column], source)

    out = df.reset_index(drop=True)
    out[column] = out[column].astype(object).str.replace(old, new, regex=False)
    return out


def filter_equals(
    df: pd.DataFrame,
    conditions: dict,
    source: str = "table",
) -> pd.DataFrame:
    """
    Keep rows where every column equals its required literal.

    Comparison is exact and case-sensitive; absent values never match.
    """
    require_columns(df, list(conditions), source)

    mask = pd.Series(True, index=df.index)
    for col, value in conditions.items():
        mask &= df[col] == value
    return df.loc[mask].reset_index(drop=True)
