"""Common functions shared across all processor implementations."""

import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from ..core import (
    Compressed,
    Failed,
    ImageJobError,
    RunPolicy,
    RunSummary,
    get_logger,
)
from ..core.error_handling import BatchOperationContextManager
from ..core.jobs import compress_job, open_job, save_job, transform_job
from ..core.pipeline import build_pipeline
from ..core.protocols import ImageCodecProtocol, ReporterProtocol

OutcomeCallback = Callable[[Union[Compressed, Failed]], None]
ProcessBatchFunction = Callable[
    [Sequence[Path], RunPolicy, Optional[OutcomeCallback]],
    List[Union[Compressed, Failed]],
]


def failed_outcome(
    path: Path, error_kind: str, message: str, duration: float = 0.0
) -> Failed:
    path = Path(path)
    return Failed(
        file_name=path.name,
        source_path=path,
        error_kind=error_kind,
        message=message,
        duration=duration,
    )


def process_single_image(
    path: Path,
    policy: RunPolicy,
    codec: Optional[ImageCodecProtocol] = None,
) -> Union[Compressed, Failed]:
    """Process a single image: Open → Resize/Sharpen/Brighten/Contrast → Compress → Save."""
    logger = get_logger("pcomp.processor")
    path = Path(path)
    start_time = time.time()

    try:
        job = open_job(policy, path, codec)
        transform_job(job, policy, build_pipeline(policy))
        compress_job(job, policy, codec)
        ratio = save_job(job)
    except ImageJobError as e:
        logger.error(f"[{path.name}] Failed processing due to {type(e).__name__}: {e}")
        return failed_outcome(path, e.kind, str(e), time.time() - start_time)

    logger.debug(f"[{path.name}] Written to {job.output_path} ({ratio}% of original).")
    return Compressed(
        file_name=path.name,
        source_path=path,
        output_path=job.output_path,
        ratio_percent=ratio,
        duration=time.time() - start_time,
    )


def log_configuration(policy: RunPolicy, processor_name: str, total_items: int):
    """Log processing configuration."""
    logger = get_logger("pcomp.processor")
    logger.info("=" * 80)
    logger.info(f"{processor_name.upper()} JPEG RECOMPRESSOR")
    logger.info("=" * 80)

    logger.info("CONFIGURATION:")
    logger.info(f"  Files:          {total_items}")
    logger.info(f"  Workers:        {policy.worker_count}")
    logger.info(f"  JPEG quality:   {policy.jpeg_quality}")
    logger.info(f"  Recurse:        {policy.recurse_subdirectories}")
    logger.info(f"  Overwrite:      {policy.overwrite_in_place}")
    logger.info(f"  Keep metadata:  {policy.preserve_metadata}")
    logger.info("")

    logger.info("PIPELINE:")
    for stage in build_pipeline(policy):
        state = "Enabled" if stage.enabled else "Disabled"
        logger.info(f"  {stage.kind.value.title():<10} {state}")
    logger.info("=" * 80)


def log_final_statistics(
    total_time: float, total_items: int, compressed_count: int, failed_count: int
):
    """Log final processing statistics."""
    logger = get_logger("pcomp.processor")
    overall_rate = total_items / total_time if total_time > 0 else 0

    logger.info("=" * 80)
    logger.info("PROCESSING COMPLETED")
    logger.info("=" * 80)
    logger.info(f"Total execution time: {total_time:.1f}s")
    logger.info(f"Overall processing rate: {overall_rate:.1f} items/sec")
    logger.info(f"Successfully compressed: {compressed_count}")
    logger.info(f"Errors encountered: {failed_count}")
    logger.info("=" * 80)


def run_processing(
    policy: RunPolicy,
    paths: Sequence[Path],
    processor_name: str,
    process_batch_fn: ProcessBatchFunction,
    reporter: Optional[ReporterProtocol] = None,
) -> RunSummary:
    """
    Run every discovered path through the given batch strategy.

    Each outcome is handed to ``reporter`` as soon as its job completes.

    Returns:
        Counts and outcomes of the run
    """
    logger = get_logger("pcomp.processor")
    log_configuration(policy, processor_name, len(paths))
    start_time = time.time()

    if not paths:
        logger.warning("No files found to process.")
        return RunSummary()

    on_outcome = reporter.report if reporter is not None else None
    operation_display_name = f"JPEG recompression via {processor_name}"

    with BatchOperationContextManager(operation_name=operation_display_name) as batch_manager:
        logger.info(f"Processing {len(paths)} images with {policy.worker_count} workers.")
        outcomes = process_batch_fn(paths, policy, on_outcome)

        for outcome in outcomes:
            if isinstance(outcome, Failed):
                batch_manager.add_error(
                    item_identifier=str(outcome.source_path), error_message=outcome.message
                )

    compressed_count = sum(1 for outcome in outcomes if isinstance(outcome, Compressed))
    failed_count = len(outcomes) - compressed_count
    total_time = time.time() - start_time
    log_final_statistics(total_time, len(outcomes), compressed_count, failed_count)

    return RunSummary(
        total=len(outcomes),
        compressed=compressed_count,
        failed=failed_count,
        elapsed_seconds=total_time,
        outcomes=outcomes,
    )
