"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Union

from PIL import Image

from .codec import DecodedImage, MarkerSegment
from .models import Compressed, Failed


class ImageCodecProtocol(Protocol):
    """Protocol for the JPEG decode/encode collaborator."""

    def decode(self, data: bytes, keep_markers: bool) -> DecodedImage:
        """Decode JPEG bytes into RGB pixels and optional marker segments."""
        ...

    def encode(
        self,
        pixels: Image.Image,
        quality: float,
        markers: Optional[Sequence[MarkerSegment]] = None,
    ) -> bytes:
        """Encode pixels as JPEG, re-emitting preserved markers first."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        ...

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        ...

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        ...


class ReporterProtocol(Protocol):
    """Protocol for the sink receiving job outcomes."""

    def report(self, outcome: Union[Compressed, Failed]) -> None:
        ...


class FileDiscoveryService(ABC):
    """Abstract service for discovering files to process."""

    @abstractmethod
    def discover_files(
        self, arguments: Iterable[Union[str, Path]], recurse: bool
    ) -> List[Path]:
        """Discover candidate files from command line arguments."""
        ...
