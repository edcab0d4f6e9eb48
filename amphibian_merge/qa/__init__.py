"""Quality assurance utilities."""

from .validators import ValidationResult, validate_merge
from .reporters import generate_qa_report, summarize_table, unique_values

__all__ = [
    "ValidationResult",
    "validate_merge",
    "generate_qa_report",
    "summarize_table",
    "unique_values",
]
