"""
Wide-to-long reshaping and packed-field decoding.

The Redwood extract stores one column per species and packs four status
fields into each cell, e.g. ``Present-Common-Breeder-Approved``. These
helpers turn that layout into one row per (record, species) pair with the
status fields in their own columns.
"""

import logging
import re
from typing import Optional, Sequence

import pandas as pd

from amphibian_merge.schemas import StructuralError, require_columns

logger = logging.getLogger(__name__)


def unpivot(
    df: pd.DataFrame,
    id_columns: Sequence[str],
    names_to: str,
    values_to: str,
    source: str = "table",
) -> pd.DataFrame:
    """
    Convert a wide table to long form.

    Every column not in *id_columns* becomes a row per input row, with its
    label in *names_to* and its cell in *values_to*. Output is row-major:
    all columns of the first input row, then all columns of the second, and
    so on, with columns in their original order.

    Args:
        df: Wide table
        id_columns: Columns carried onto every output row
        names_to: Name of the column holding former column labels
        values_to: Name of the column holding the cell values
        source: Source name used in error messages

    Returns:
        Long table with ``len(df) * n_value_columns`` rows
    """
    id_columns = list(id_columns)
    require_columns(df, id_columns, source)

    value_columns = [c for c in df.columns if c not in id_columns]
    wide = df.reset_index(drop=True)
    long = wide.melt(
        id_vars=id_columns,
        value_vars=value_columns,
        var_name=names_to,
        value_name=values_to,
        ignore_index=False,
    )
    # melt is column-major; a stable sort on the original row position
    # restores row-major order
    long = long.sort_index(kind="stable").reset_index(drop=True)

    logger.info(
        f"{source}: unpivoted {len(wide)} rows x {len(value_columns)} columns "
        f"-> {len(long)} rows"
    )
    return long


def drop_absent(
    df: pd.DataFrame,
    column: str,
    source: str = "table",
) -> pd.DataFrame:
    """Remove rows whose *column* value is absent."""
    require_columns(df, [column], source)

    keep = df[column].notna()
    n_dropped = int((~keep).sum())
    logger.info(f"{source}: dropped {n_dropped} rows with absent {column}")
    return df.loc[keep].reset_index(drop=True)


def split_packed(
    df: pd.DataFrame,
    column: str,
    into: Sequence[str],
    sep: str = "-",
    source: str = "table",
    id_column: Optional[str] = None,
) -> pd.DataFrame:
    """
    Split a packed text column into exactly ``len(into)`` columns.

    The new columns replace *column* at its position. Every value must
    contain exactly ``len(into) - 1`` separators; anything else raises
    StructuralError. Values are never padded or truncated.

    Args:
        df: Input table
        column: Packed column
        into: Names of the decoded columns, in order
        sep: Literal separator
        source: Source name used in error messages
        id_column: Optional identifier column quoted in error messages

    Returns:
        Table with *column* replaced by *into*

    Raises:
        StructuralError: If any value does not split into ``len(into)`` parts
    """
    into = list(into)
    require_columns(df, [column], source)

    df = df.reset_index(drop=True)
    values = df[column]
    n_parts = values.astype(object).str.count(re.escape(sep)) + 1
    bad = ~(n_parts == len(into))
    if bad.any():
        idx = bad[bad].index[0]
        value = values.iloc[idx]
        where = f" ({id_column}={df[id_column].iloc[idx]!r})" if id_column else ""
        detail = "is absent" if pd.isna(value) else f"splits into {int(n_parts.iloc[idx])} fields"
        raise StructuralError(
            f"{source}: value {value!r} in column '{column}'{where} {detail}, "
            f"expected {len(into)} fields separated by '{sep}'",
            source=source,
            column=column,
            value=value,
        )

    decoded = pd.DataFrame(
        values.astype(object).str.split(sep, regex=False).tolist(),
        columns=into,
        index=df.index,
    )
    position = df.columns.get_loc(column)
    out = pd.concat(
        [df.iloc[:, :position], decoded, df.iloc[:, position + 1:]],
        axis=1,
    )
    return out
