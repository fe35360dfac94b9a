"""Console reporting of job outcomes and run timing."""

import sys
from typing import Optional, TextIO, Union

from .models import Compressed, Failed


def format_outcome(outcome: Union[Compressed, Failed]) -> str:
    """Render the report line for a single job outcome."""
    if isinstance(outcome, Compressed):
        return (
            f"{outcome.file_name} has been compressed to "
            f"{outcome.ratio_percent}% of its original size."
        )
    return f'{outcome.file_name} fails to compress due to "{outcome.message}".'


def format_elapsed(seconds: float) -> str:
    return f"Total Time: {seconds:.3f}s"


class Reporter:
    """Writes one line per finished job, then the total elapsed time."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self.compressed = 0
        self.failed = 0

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output
        return self._stream or sys.stdout

    def _write(self, line: str) -> None:
        print(line, file=self.stream, flush=True)

    def report(self, outcome: Union[Compressed, Failed]) -> None:
        if isinstance(outcome, Compressed):
            self.compressed += 1
        else:
            self.failed += 1
        self._write(format_outcome(outcome))

    def report_fatal(self, message: str) -> None:
        self._write(f"Error: {message}")

    def report_elapsed(self, seconds: float) -> None:
        self._write(format_elapsed(seconds))
