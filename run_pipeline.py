#!/usr/bin/env python3
"""
Amphibian Merge Pipeline - Main Runner

Usage:
    python run_pipeline.py --help
    python run_pipeline.py merge             # Build working_data.txt
    python run_pipeline.py qa                # Merge in memory, write QA report
    python run_pipeline.py reports           # Render per-site HTML reports
    python run_pipeline.py all               # Merge, QA report and site reports

Options:
    --config PATH      JSON config overriding the defaults
    --raw-dir DIR      Directory holding the five extracts
    --output PATH      Artifact path (default data/final/working_data.txt)
    --staging          Dump every stage's table to data/staging as parquet
"""

import argparse
import logging
import sys
from pathlib import Path

from amphibian_merge.config import PipelineConfig, load_config
from amphibian_merge.schemas import StructuralError

logger = logging.getLogger(__name__)


def stage_merge(cfg: PipelineConfig, output_path: Path) -> Path:
    """Run stages 1-5 and write the merged artifact."""
    logger.info("=== Merge: Build Combined Observation Table ===")

    from amphibian_merge.pipeline import run_full_pipeline

    results = run_full_pipeline(cfg, output_path=output_path, run_qa=False)
    return results['stage5_output']


def stage_qa(cfg: PipelineConfig) -> Path:
    """Merge in memory and write the QA report."""
    logger.info("=== QA: Merge Quality Report ===")

    from amphibian_merge.pipeline import run_full_pipeline

    report_path = Path(cfg.reports_dir) / "qa_report.md"
    results = run_full_pipeline(cfg, write=False, run_qa=True, qa_report_path=report_path)

    failed = [c for c in results['qa'] if not c.passed]
    for check in failed:
        logger.warning(f"  ✗ {check.check_name}: {check.message}")
    logger.info(f"QA report: {report_path}")
    return report_path


def stage_reports(cfg: PipelineConfig, data_path: Path) -> list:
    """Render per-site reports from the merged artifact."""
    logger.info("=== Reports: Per-Site HTML ===")

    from amphibian_merge.reports import render_site_reports
    from amphibian_merge.utils.io import read_delimited

    data = read_delimited(data_path, sep=cfg.output.sep)
    return render_site_reports(data, Path(cfg.reports_dir), cfg.report)


def run_all(cfg: PipelineConfig, output_path: Path) -> None:
    """Merge with QA, then render site reports from the written artifact."""
    from amphibian_merge.pipeline import run_full_pipeline

    report_path = Path(cfg.reports_dir) / "qa_report.md"
    results = run_full_pipeline(cfg, output_path=output_path, qa_report_path=report_path)
    stage_reports(cfg, results['stage5_output'])

    logger.info("\nPipeline complete!")
    logger.info(f"Merged output: {results['stage5_output']}")


def main():
    parser = argparse.ArgumentParser(
        description="Amphibian Merge Pipeline - National Park Amphibian Synthesis"
    )

    parser.add_argument(
        "stage",
        choices=["merge", "qa", "reports", "all"],
        help="Pipeline stage to run"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON config file (defaults are used for missing keys)"
    )
    parser.add_argument(
        "--raw-dir",
        type=str,
        default=None,
        help="Directory holding the input extracts"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path of the merged artifact"
    )
    parser.add_argument(
        "--staging",
        action="store_true",
        help="Write each stage's table to the staging directory as parquet"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    cfg = load_config(args.config)
    if args.raw_dir:
        cfg.raw_dir = args.raw_dir
    if args.staging:
        cfg.dump_staging = True
    output_path = Path(args.output) if args.output else cfg.output_path

    try:
        if args.stage == "merge":
            stage_merge(cfg, output_path)
        elif args.stage == "qa":
            stage_qa(cfg)
        elif args.stage == "reports":
            stage_reports(cfg, output_path)
        elif args.stage == "all":
            run_all(cfg, output_path)
    except (StructuralError, FileNotFoundError) as e:
        logger.error(f"Pipeline aborted: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
