"""Multiprocess processor implementation - uses process pool for parallelism."""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union
from concurrent.futures import ProcessPoolExecutor, as_completed

from ..core import (
    Compressed,
    Failed,
    RunPolicy,
    configure_multiprocessing_logging,
)
from .common import OutcomeCallback, failed_outcome, process_single_image


def process_single_image_worker(
    args: Tuple[Path, RunPolicy]
) -> Union[Compressed, Failed]:
    """
    Worker function designed for use with a `ProcessPoolExecutor`.

    It takes a tuple of the source path and the run policy, configures
    logging for the current process, then runs the full job lifecycle.

    Args:
        args: A tuple `(path: Path, policy: RunPolicy)`.

    Returns:
        A `Compressed` or `Failed` outcome.
    """
    path, policy = args

    worker_logger = configure_multiprocessing_logging()
    worker_logger.debug(f"Picked up {path.name}")

    return process_single_image(path, policy)


def process_batch(
    paths: Sequence[Path],
    policy: RunPolicy,
    on_outcome: Optional[OutcomeCallback] = None,
) -> List[Union[Compressed, Failed]]:
    """
    Processes images on a `ProcessPoolExecutor` of ``policy.worker_count``
    processes.

    Every worker receives its own pickled copy of the immutable policy.

    Args:
        paths: Discovered source files.
        policy: Run policy shared by all workers.
        on_outcome: Called in the parent process as each job completes.

    Returns:
        One outcome per path, in completion order.
    """
    work_items = [(Path(path), policy) for path in paths]
    results: List[Union[Compressed, Failed]] = []

    with ProcessPoolExecutor(max_workers=policy.worker_count) as executor:
        future_to_path = {
            executor.submit(process_single_image_worker, work_item): work_item[0]
            for work_item in work_items
        }

        for future in as_completed(future_to_path):
            try:
                result = future.result()
            except Exception as e:
                # Broken pool or unpicklable result
                result = failed_outcome(future_to_path[future], "internal", str(e))
            results.append(result)
            if on_outcome is not None:
                on_outcome(result)

    return results
