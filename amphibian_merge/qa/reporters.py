"""
QA report generation for the merge pipeline.

Produces qa_report.md with table summaries, missingness and validation
results, and provides the quick-look summaries logged after each stage.
"""

import pandas as pd
from pathlib import Path
from typing import Optional, Dict, List, Any
from datetime import datetime
import logging

from amphibian_merge.qa.validators import ValidationResult

logger = logging.getLogger(__name__)


def compute_missingness(df: pd.DataFrame) -> Dict[str, float]:
    """Compute missingness rate for each column."""
    return {
        col: df[col].isna().mean()
        for col in df.columns
    }


def unique_values(df: pd.DataFrame, max_values: int = 20) -> Dict[str, List[Any]]:
    """Distinct non-absent values per column, truncated to *max_values*."""
    return {
        col: df[col].dropna().unique().tolist()[:max_values]
        for col in df.columns
    }


def summarize_table(df: pd.DataFrame, name: str) -> Dict[str, Any]:
    """Get summary statistics of a table."""
    summary = {
        "table": name,
        "rows": len(df),
        "columns": len(df.columns),
        "column_names": list(df.columns),
    }
    if "park_name" in df.columns:
        summary["parks"] = df["park_name"].nunique()
    if "scientific_name" in df.columns:
        summary["species"] = df["scientific_name"].nunique()
    return summary


def log_summary(df: pd.DataFrame, name: str) -> None:
    summary = summarize_table(df, name)
    extra = ", ".join(
        f"{k}={summary[k]}" for k in ("parks", "species") if k in summary
    )
    logger.info(
        f"{name}: {summary['rows']:,} rows x {summary['columns']} columns"
        + (f" ({extra})" if extra else "")
    )


def log_unique_values(
    df: pd.DataFrame,
    name: str,
    columns: Optional[List[str]] = None,
    max_values: int = 20,
) -> Dict[str, List[Any]]:
    """Log the distinct values of *columns* (all columns if None)."""
    present = [c for c in (columns or df.columns) if c in df.columns]
    values = unique_values(df[present], max_values=max_values)
    for col, distinct in values.items():
        logger.info(f"{name}.{col}: {distinct}")
    return values


def _validation_table(results: List[ValidationResult]) -> List[str]:
    lines = [
        "| Check | Status | Details |",
        "|-------|--------|---------|",
    ]
    for v in results:
        status = "✅ Pass" if v.passed else "⚠️ Warn"
        lines.append(f"| {v.check_name} | {status} | {v.message} |")
    return lines


def generate_qa_report(
    tables: Dict[str, pd.DataFrame],
    results: List[ValidationResult],
    output_path: Optional[Path] = None,
) -> str:
    """
    Generate the QA report.

    Args:
        tables: Named tables to summarize (the merged table last)
        results: Output of ``validate_merge``
        output_path: Where to write the markdown (not written if None)

    Returns:
        Markdown report string
    """
    sections = []

    sections.append(f"""# Data Quality Assurance Report

Generated: {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}

This report summarizes the inputs and output of the amphibian merge.
""")

    sections.append("""
## Table Summary

| Table | Rows | Columns | Parks | Species |
|-------|------|---------|-------|---------|""")
    for name, df in tables.items():
        s = summarize_table(df, name)
        sections.append(
            f"| {name} | {s['rows']:,} | {s['columns']} | "
            f"{s.get('parks', '')} | {s.get('species', '')} |"
        )

    if tables:
        last_name, last_df = list(tables.items())[-1]
        sections.append(f"""
## Missingness ({last_name})

| Column | Missing |
|--------|---------|""")
        for col, rate in compute_missingness(last_df).items():
            sections.append(f"| {col} | {rate:.1%} |")

    sections.append("""
## Validation Checks
""")
    sections.extend(_validation_table(results))

    n_failed = sum(1 for v in results if not v.passed)
    sections.append(f"""
**{len(results) - n_failed}/{len(results)} checks passed.** Failed checks do
not stop the pipeline; they mark rows that may be incomplete in the output.
""")

    report = "\n".join(sections)

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(report, encoding="utf-8")
        logger.info(f"QA report saved to {output_path}")

    return report
