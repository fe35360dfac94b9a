"""Multithreaded processor implementation - uses thread pool for parallelism."""

from pathlib import Path
from typing import List, Optional, Sequence, Union
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..core import Compressed, Failed, RunPolicy
from ..core.protocols import ImageCodecProtocol
from .common import OutcomeCallback, failed_outcome, process_single_image


def process_batch(
    paths: Sequence[Path],
    policy: RunPolicy,
    on_outcome: Optional[OutcomeCallback] = None,
    codec: Optional[ImageCodecProtocol] = None,
) -> List[Union[Compressed, Failed]]:
    """
    Process images on a pool of exactly ``policy.worker_count`` threads.

    Pillow and numpy release the GIL for decoding, resampling and encoding,
    so threads run the heavy parts in parallel.

    Args:
        paths: Discovered source files
        policy: Shared, read-only run policy
        on_outcome: Called in this thread as each job completes
        codec: Codec override, defaults to the Pillow JPEG codec

    Returns:
        One outcome per path, in completion order
    """
    results: List[Union[Compressed, Failed]] = []

    with ThreadPoolExecutor(max_workers=policy.worker_count) as executor:
        future_to_path = {
            executor.submit(process_single_image, path, policy, codec): path
            for path in paths
        }

        for future in as_completed(future_to_path):
            try:
                result = future.result()
            except Exception as e:
                result = failed_outcome(future_to_path[future], "internal", str(e))
            results.append(result)
            if on_outcome is not None:
                on_outcome(result)

    return results
