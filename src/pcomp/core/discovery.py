"""Local file discovery for the pcomp pipeline."""

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .exceptions import DiscoveryError
from .logging_config import get_logger
from .protocols import FileDiscoveryService, LoggerProtocol


class LocalFileDiscoveryService(FileDiscoveryService):
    """
    Service for enumerating candidate files from command line arguments.

    Discovery is pure path enumeration: no extension filtering happens here
    and nothing beyond ``stat`` and directory listings touches the disk.
    """

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        self._logger = logger or get_logger("pcomp.discovery")

    def discover_files(
        self, arguments: Iterable[Union[str, Path]], recurse: bool
    ) -> List[Path]:
        """
        Expand arguments into a deduplicated list of absolute file paths.

        Files are taken as given, directories contribute their immediate
        files and, when ``recurse`` is set, the files of every nested
        directory. Arguments that do not exist are dropped.
        """
        files: List[Path] = []
        seen = set()

        def add(path: Path) -> None:
            if path not in seen:
                seen.add(path)
                files.append(path)

        for argument in arguments:
            path = Path(os.path.abspath(argument))
            if path.is_file():
                add(path)
            elif path.is_dir():
                for file_path in self._expand_directory(path, recurse):
                    add(file_path)
            else:
                self._logger.debug(f"Skipping missing source path: {argument}")

        self._logger.info(f"Found {len(files)} candidate files")
        return files

    def _expand_directory(self, root: Path, recurse: bool) -> Iterator[Path]:
        # Explicit stack instead of recursion. Symlinked directories are
        # followed and cycles are not detected.
        stack = [root]
        while stack:
            directory = stack.pop()
            try:
                file_entries, subdirectories = self._list_directory(directory)
            except DiscoveryError as exc:
                self._logger.warning(f"Skipping unreadable directory: {exc}")
                continue

            yield from file_entries
            if recurse:
                stack.extend(reversed(subdirectories))

    def _list_directory(self, directory: Path) -> Tuple[List[Path], List[Path]]:
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            raise DiscoveryError(f"{directory}: {exc}") from exc

        file_entries: List[Path] = []
        subdirectories: List[Path] = []
        for entry in entries:
            try:
                if entry.is_file():
                    file_entries.append(Path(entry.path))
                elif entry.is_dir():
                    subdirectories.append(Path(entry.path))
            except OSError as exc:
                self._logger.debug(f"Skipping entry {entry.path}: {exc}")
        return file_entries, subdirectories


def discover_files(
    arguments: Iterable[Union[str, Path]], recurse: bool
) -> List[Path]:
    """Discover candidate files with the default local discovery service."""
    return LocalFileDiscoveryService().discover_files(arguments, recurse)
