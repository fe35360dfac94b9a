"""Image processors with different concurrency strategies."""

from .multiprocess import process_batch as multiprocess_process_batch
from .multithread import process_batch as multithread_process_batch

__all__ = [
    "multithread_process_batch",
    "multiprocess_process_batch",
]
