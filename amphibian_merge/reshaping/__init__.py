"""Table reshaping utilities used by the pipeline stages."""

from .columns import (
    lowercase_columns,
    unite_columns,
    forward_fill,
    null_sentinel,
    replace_literal,
    filter_equals,
)
from .pivot import unpivot, drop_absent, split_packed
from .joins import stack_tables, left_join, shared_columns

__all__ = [
    "lowercase_columns",
    "unite_columns",
    "forward_fill",
    "null_sentinel",
    "replace_literal",
    "filter_equals",
    "unpivot",
    "drop_absent",
    "split_packed",
    "stack_tables",
    "left_join",
    "shared_columns",
]
