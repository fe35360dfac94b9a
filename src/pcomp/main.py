#!/usr/bin/env python3
"""
pcomp - batch JPEG recompressor

Opens images → Resize/Sharpen/Brighten/Contrast → Re-encodes → Saves
All behavior comes from pcomp.toml in the working directory.
"""

import sys
import time
import argparse
from typing import Dict, List, Optional, Tuple

from .core import (
    CONFIG_FILE_NAME,
    ConfigError,
    LocalFileDiscoveryService,
    Reporter,
    get_logger,
    load_policy,
)
from .processors import multiprocess_process_batch, multithread_process_batch
from .processors.common import ProcessBatchFunction, run_processing

PROCESSORS: Dict[str, Tuple[str, ProcessBatchFunction]] = {
    "thread": ("Multithreaded", multithread_process_batch),
    "process": ("Multiprocess", multiprocess_process_batch),
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the recompressor.

    The only arguments are the source paths; argparse exits with status 2
    when none is given.

    Returns:
        An `argparse.Namespace` with a `paths` list.
    """
    parser = argparse.ArgumentParser(
        prog="pcomp",
        description=(
            "Re-compress JPEG files with an optional resize/sharpen/brighten/"
            f"contrast pipeline. Settings are read from ./{CONFIG_FILE_NAME}."
        ),
    )
    parser.add_argument(
        "paths", nargs="+", metavar="PATH", help="JPEG files or directories to process"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the pcomp command.

    Loads the run policy, discovers files, runs them through the strategy
    named by `general.worker_mode` and prints one line per file followed by
    the total elapsed time. Only configuration-level failures stop the run
    (exit status 1); per-file failures are reported inline.
    """
    start_time = time.time()
    args = parse_args(argv)
    logger = get_logger("pcomp")
    reporter = Reporter()
    exit_code = 0

    try:
        policy = load_policy(CONFIG_FILE_NAME)
        paths = LocalFileDiscoveryService().discover_files(
            args.paths, policy.recurse_subdirectories
        )

        processor_name, process_batch_fn = PROCESSORS[policy.worker_mode]
        run_processing(policy, paths, processor_name, process_batch_fn, reporter)

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        reporter.report_fatal(str(e))
        exit_code = 1
    except KeyboardInterrupt:
        logger.warning("Processing interrupted by user.")
        exit_code = 130
    except Exception as e:
        logger.error(f"Processing failed: {e}", exc_info=True)
        reporter.report_fatal(str(e))
        exit_code = 1

    reporter.report_elapsed(time.time() - start_time)
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
