"""
Pipeline Runner

Orchestrates the complete 5-stage merge pipeline.

Stages:
    1. FILTER    - Approved amphibian rows from the primary table
    2. NORMALIZE - Acadia extract into the primary layout
    3. DECODE    - Redwood wide records into long form
    4. MERGE     - Species/park enrichment and stacking
    5. OUTPUT    - Tab-delimited artifact

Stages run strictly in order and are never retried. Every extract is read
once. A StructuralError or a missing input file aborts the run before
anything is written.
"""

import logging
import time
from pathlib import Path
from typing import Optional

from amphibian_merge.config import DEFAULT_CONFIG, PipelineConfig

logger = logging.getLogger(__name__)


def run_full_pipeline(
    cfg: PipelineConfig = DEFAULT_CONFIG,
    output_path: Optional[Path] = None,
    write: bool = True,
    run_qa: bool = True,
    qa_report_path: Optional[Path] = None,
) -> dict:
    """
    Run the complete 5-stage pipeline.

    Args:
        cfg: Pipeline configuration
        output_path: Override for the artifact path (default cfg.output_path)
        write: Write the artifact (Stage 5)
        run_qa: Run the non-fatal QA checks on the merged table
        qa_report_path: Write the QA markdown report here when set

    Returns:
        dict: Stage tables, lookup tables, QA results and the artifact path
    """
    from .sources import load_source
    from .stage1_filter import run_filter
    from .stage2_normalize import run_normalize
    from .stage3_decode import run_decode
    from .stage4_merge import run_merge, stack_observations
    from .stage5_output import run_output

    start_time = time.time()

    logger.info("=" * 70)
    logger.info("AMPHIBIAN MERGE PIPELINE")
    logger.info("=" * 70)

    results = {
        'stage1_filter': run_filter(cfg),
        'stage2_normalize': run_normalize(cfg),
        'stage3_decode': run_decode(cfg),
        'species': load_source(cfg, "species"),
        'parks': load_source(cfg, "parks"),
    }
    results['stage4_stacked'] = stack_observations(
        results['stage1_filter'],
        results['stage2_normalize'],
        results['stage3_decode'],
        results['species'],
        cfg.merge,
    )
    results['stage4_merge'] = run_merge(
        results['stage1_filter'],
        results['stage2_normalize'],
        results['stage3_decode'],
        cfg,
        parks=results['parks'],
        observations=results['stage4_stacked'],
    )

    if run_qa:
        results['qa'] = run_quality_checks(results, cfg, qa_report_path)

    if write:
        results['stage5_output'] = run_output(results['stage4_merge'], cfg, output_path)
    else:
        logger.info("Skipping Stage 5: Write Output")

    elapsed = time.time() - start_time

    logger.info("\n" + "=" * 70)
    logger.info("PIPELINE COMPLETE")
    logger.info("=" * 70)
    logger.info(f"Total time: {elapsed:.1f} seconds")

    return results


def run_quality_checks(
    results: dict,
    cfg: PipelineConfig = DEFAULT_CONFIG,
    report_path: Optional[Path] = None,
) -> list:
    """
    Validate the merge and optionally write the QA report.

    Args:
        results: Output of ``run_full_pipeline`` up to Stage 4
        cfg: Pipeline configuration
        report_path: Markdown report destination (skipped if None)

    Returns:
        list: ValidationResult objects
    """
    from amphibian_merge.qa import generate_qa_report, validate_merge
    from amphibian_merge.qa.reporters import log_summary, log_unique_values

    logger.info("=" * 60)
    logger.info("QA CHECKS")
    logger.info("=" * 60)

    tables = {
        "primary": results['stage1_filter'],
        "secondary": results['stage2_normalize'],
        "records": results['stage3_decode'],
        "species": results['species'],
        "parks": results['parks'],
        "merged": results['stage4_merge'],
    }
    for name, df in tables.items():
        log_summary(df, name)
    log_unique_values(tables["records"], "records", cfg.decode.packed_fields)

    checks = validate_merge(
        primary=tables["primary"],
        secondary=tables["secondary"],
        records=tables["records"],
        species=tables["species"],
        parks=tables["parks"],
        observations=results['stage4_stacked'],
        cfg=cfg,
    )

    n_passed = sum(1 for c in checks if c.passed)
    logger.info(f"QA: {n_passed}/{len(checks)} checks passed")

    if report_path is not None:
        generate_qa_report(tables, checks, report_path)

    return checks


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    run_full_pipeline()
