"""Per-file job lifecycle: open, compress and save."""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from PIL import Image

from .codec import JpegCodec, MarkerSegment
from .error_handling import with_error_handling
from .exceptions import CodecError, FileIOError, UnsupportedFormatError
from .logging_config import get_logger
from .models import RunPolicy
from .pipeline import TransformStage, build_pipeline, run_pipeline
from .protocols import ImageCodecProtocol

OUTPUT_DIR_NAME = "compressed"
JPEG_EXTENSIONS = (".jpg", ".jpeg")


@dataclass
class ImageJob:
    """Unit of work for one source file, owned by a single worker."""

    source_path: Path
    original_byte_size: int
    pixels: Image.Image
    output_path: Path
    metadata_segments: Optional[Tuple[MarkerSegment, ...]] = None
    encoded_bytes: Optional[bytes] = None

    @property
    def file_name(self) -> str:
        return self.source_path.name


def resolve_output_path(source_path: Path, overwrite_in_place: bool) -> Path:
    """
    Compute where the re-encoded file goes.

    Args:
        source_path: The file being processed
        overwrite_in_place: Whether the source itself is replaced

    Returns:
        ``source_path`` itself, or ``<parent>/compressed/<name>``
    """
    if overwrite_in_place:
        return source_path
    return source_path.parent / OUTPUT_DIR_NAME / source_path.name


def compression_ratio(original_byte_size: int, encoded_byte_size: int) -> int:
    """Output size as a rounded percentage of the original size."""
    if original_byte_size <= 0:
        raise FileIOError("Source file is empty")
    return round(encoded_byte_size / original_byte_size * 100)


@with_error_handling
def open_job(
    policy: RunPolicy,
    path: Path,
    codec: Optional[ImageCodecProtocol] = None,
) -> ImageJob:
    """
    Validate, read and decode a source file into an ImageJob.

    The output path is resolved here, once, and its ``compressed``
    directory is created if needed. Concurrent creation is harmless.

    Raises:
        UnsupportedFormatError: If the extension is not .jpg/.jpeg.
        FileIOError: If the file cannot be read or the output directory
            cannot be created.
        CodecError: If the bytes are not a decodable JPEG.
    """
    logger = get_logger("pcomp.jobs")
    codec = codec or JpegCodec()
    path = Path(path)

    if path.suffix.lower() not in JPEG_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported file extension '{path.suffix or '<none>'}', expected .jpg or .jpeg"
        )

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FileIOError(f"Cannot read {path}: {exc}") from exc

    decoded = codec.decode(data, keep_markers=policy.preserve_metadata)
    logger.debug(
        f"[{path.name}] Decoded {decoded.pixels.size[0]}x{decoded.pixels.size[1]}, "
        f"{len(data)} bytes"
    )

    output_path = resolve_output_path(path, policy.overwrite_in_place)
    if not policy.overwrite_in_place:
        try:
            output_path.parent.mkdir(exist_ok=True)
        except OSError as exc:
            raise FileIOError(f"Cannot create {output_path.parent}: {exc}") from exc

    return ImageJob(
        source_path=path,
        original_byte_size=len(data),
        pixels=decoded.pixels,
        output_path=output_path,
        metadata_segments=decoded.markers if policy.preserve_metadata else None,
    )


@with_error_handling
def transform_job(
    job: ImageJob,
    policy: RunPolicy,
    stages: Optional[Iterable[TransformStage]] = None,
) -> ImageJob:
    """Run the enabled transform stages over the job's pixels, in order."""
    if stages is None:
        stages = build_pipeline(policy)
    job.pixels = run_pipeline(job.pixels, stages)
    return job


@with_error_handling
def compress_job(
    job: ImageJob,
    policy: RunPolicy,
    codec: Optional[ImageCodecProtocol] = None,
) -> ImageJob:
    """Encode the job's current pixels at the policy's JPEG quality."""
    codec = codec or JpegCodec()
    job.encoded_bytes = codec.encode(
        job.pixels, policy.jpeg_quality, job.metadata_segments
    )
    return job


def _write_atomically(path: Path, data: bytes) -> None:
    """Replace ``path`` with ``data`` via a sibling temp file; ``path`` is untouched on failure."""
    tmp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            tmp_path.write_bytes(data)
            if path.is_file():
                shutil.copymode(path, tmp_path)
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise FileIOError(f"Cannot write {path}: {exc}") from exc


@with_error_handling
def save_job(job: ImageJob) -> int:
    """
    Write the encoded bytes to the resolved output path.

    Returns:
        The output size as a percentage of the original size
    """
    if job.encoded_bytes is None:
        raise CodecError(f"{job.file_name} has not been compressed")

    _write_atomically(job.output_path, job.encoded_bytes)

    return compression_ratio(job.original_byte_size, len(job.encoded_bytes))
