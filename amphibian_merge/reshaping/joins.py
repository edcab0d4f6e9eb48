"""
Row stacking and key-based joins.

Join keys are always declared by the caller. Columns that happen to share a
name across two tables are never used as keys implicitly; ``shared_columns``
exists so QA can report them.
"""

import logging
from typing import List, Sequence

import pandas as pd

from amphibian_merge.schemas import require_columns

logger = logging.getLogger(__name__)


def stack_tables(tables: Sequence[pd.DataFrame]) -> pd.DataFrame:
    """
    Stack tables by column label (union of schemas).

    Columns appear in order of first appearance across *tables*; a column
    missing from one table is absent for that table's rows. Tables are
    concatenated in the order given and row order within each is kept.

    Args:
        tables: Tables to stack, in output order

    Returns:
        Stacked table with a fresh RangeIndex
    """
    tables = list(tables)
    if not tables:
        raise ValueError("stack_tables needs at least one table")

    stacked = pd.concat(tables, axis=0, ignore_index=True, sort=False)
    logger.info(
        f"Stacked {len(tables)} tables: "
        f"{' + '.join(str(len(t)) for t in tables)} = {len(stacked)} rows, "
        f"{len(stacked.columns)} columns"
    )
    return stacked


def left_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    on: Sequence[str],
    left_name: str = "left table",
    right_name: str = "right table",
) -> pd.DataFrame:
    """
    Left join *right* onto *left* using declared key columns.

    Every left row is kept. A left row matching several right rows is
    repeated once per match; a left row matching none gets absent values
    in the right-only columns. Left row order is preserved.

    Right non-key columns whose labels already exist in *left* are not
    brought over; the left values win. This is logged at INFO; the QA
    undeclared-shared-columns check reports it as a finding.

    Args:
        left: Table whose rows are all kept
        right: Lookup table
        on: Key columns present in both tables
        left_name: Name of the left table for messages
        right_name: Name of the right table for messages

    Returns:
        Joined table with a fresh RangeIndex
    """
    on = list(on)
    require_columns(left, on, left_name)
    require_columns(right, on, right_name)

    overlap = [c for c in right.columns if c in left.columns and c not in on]
    if overlap:
        logger.info(
            f"{right_name} shares non-key columns {overlap} with {left_name}; "
            f"keeping the {left_name} values"
        )
        right = right.drop(columns=overlap)

    dup_keys = int(right.duplicated(subset=on).sum())
    if dup_keys:
        logger.warning(
            f"{right_name} has {dup_keys} repeated keys on {on}; "
            "matching left rows will be repeated"
        )

    joined = left.merge(right, how="left", on=on, sort=False)
    joined = joined.reset_index(drop=True)

    added = [c for c in right.columns if c not in on]
    if added:
        n_unmatched = int(joined[added].isna().all(axis=1).sum())
        logger.info(
            f"Joined {right_name} onto {left_name} on {on}: "
            f"{len(left)} -> {len(joined)} rows, {n_unmatched} without a match"
        )
    return joined


def shared_columns(left: pd.DataFrame, right: pd.DataFrame) -> List[str]:
    """Column labels present in both tables, in *left* order."""
    return [c for c in left.columns if c in right.columns]
