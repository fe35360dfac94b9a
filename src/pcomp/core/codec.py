"""JPEG codec boundary: Pillow decode/encode plus marker segment handling."""

import io
import struct
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from PIL import Image, UnidentifiedImageError

from .exceptions import CodecError

SOI = 0xD8
EOI = 0xD9
SOS = 0xDA
TEM = 0x01
COM = 0xFE
APP0 = 0xE0
APP2 = 0xE2
APP15 = 0xEF

# Pillow reports multi-picture JPEGs (MPF index in APP2) as MPO
JPEG_FORMATS = ("JPEG", "MPO")
MPF_SIGNATURE = b"MPF\x00"

# Markers without a length field
_STANDALONE_MARKERS = {SOI, TEM, *range(0xD0, 0xD8)}

_DECODE_ERRORS = (
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)


@dataclass(frozen=True)
class MarkerSegment:
    """An APPn or COM segment of a JPEG header, payload without length."""

    marker: int
    data: bytes

    def to_bytes(self) -> bytes:
        return (
            bytes((0xFF, self.marker))
            + struct.pack(">H", len(self.data) + 2)
            + self.data
        )


@dataclass
class DecodedImage:
    """Raw pixel data plus the preserved header segments of a JPEG."""

    pixels: Image.Image
    markers: Optional[Tuple[MarkerSegment, ...]] = None


def is_metadata_marker(marker: int) -> bool:
    return APP0 <= marker <= APP15 or marker == COM


def _iter_header_segments(data: bytes) -> Iterator[Tuple[int, int, int, int]]:
    """
    Walk the header of a JPEG bitstream.

    Yields ``(marker, start, payload_start, end)`` for every segment after
    SOI. ``data[start:end]`` is the complete segment and
    ``data[payload_start:end]`` its payload. Iteration stops with the SOS
    (or EOI) marker, yielded as ``(marker, start, start, len(data))``.
    """
    if len(data) < 4 or data[0] != 0xFF or data[1] != SOI:
        raise CodecError("Not a JPEG bitstream: missing SOI marker")

    pos = 2
    size = len(data)
    while pos < size:
        if data[pos] != 0xFF:
            raise CodecError(f"Corrupt JPEG header: expected marker at offset {pos}")
        start = pos
        while pos < size and data[pos] == 0xFF:
            pos += 1
        if pos >= size:
            break
        marker = data[pos]
        pos += 1

        if marker in (SOS, EOI):
            yield marker, start, start, size
            return
        if marker in _STANDALONE_MARKERS:
            continue
        if pos + 2 > size:
            raise CodecError("Corrupt JPEG header: truncated segment length")
        (length,) = struct.unpack(">H", data[pos:pos + 2])
        end = pos + length
        if length < 2 or end > size:
            raise CodecError(
                f"Corrupt JPEG header: bad length for marker 0x{marker:02X}"
            )
        yield marker, start, pos + 2, end
        pos = end

    raise CodecError("Corrupt JPEG header: no start of scan found")


def _open_jpeg(data: bytes) -> Image.Image:
    """Open JPEG bytes with Pillow, positioned on the primary picture."""
    try:
        image = Image.open(io.BytesIO(data))
    except UnidentifiedImageError as exc:
        raise CodecError("JPEG decoding failed: unrecognized image data") from exc
    except _DECODE_ERRORS as exc:
        raise CodecError(f"JPEG decoding failed: {exc}") from exc

    if image.format not in JPEG_FORMATS:
        raise CodecError(f"Not a JPEG bitstream (detected {image.format})")
    if image.format == "MPO":
        image.seek(0)
    return image


def segments_from_applist(
    applist: Iterable[Tuple[str, bytes]]
) -> Tuple[MarkerSegment, ...]:
    """
    Convert Pillow's ``applist`` into marker segments, in file order.

    The MPF index is dropped: its offsets address pictures that a
    re-encoded file no longer contains.
    """
    segments: List[MarkerSegment] = []
    for name, payload in applist:
        marker = COM if name == "COM" else APP0 + int(name[3:])
        if marker == APP2 and payload.startswith(MPF_SIGNATURE):
            continue
        segments.append(MarkerSegment(marker, bytes(payload)))
    return tuple(segments)


def read_marker_segments(data: bytes) -> Tuple[MarkerSegment, ...]:
    """Return the APPn and COM segments of a JPEG's primary picture."""
    return segments_from_applist(_open_jpeg(data).applist)


def splice_marker_segments(data: bytes, segments: Sequence[MarkerSegment]) -> bytes:
    """
    Replace the APPn and COM segments of an encoded JPEG.

    The given segments are written verbatim right after SOI, in order; the
    remaining header segments and the scan data follow untouched.
    """
    kept: List[bytes] = []
    tail = b""
    for marker, start, _payload_start, end in _iter_header_segments(data):
        if marker in (SOS, EOI):
            tail = data[start:]
            break
        if not is_metadata_marker(marker):
            kept.append(data[start:end])

    return b"".join(
        [b"\xFF\xD8"]
        + [segment.to_bytes() for segment in segments]
        + kept
        + [tail]
    )


def pillow_quality(quality: float) -> int:
    """Map the configured (0, 100] quality onto Pillow's integer scale."""
    return max(1, min(100, int(round(quality))))


class JpegCodec:
    """Pillow backed implementation of the codec boundary."""

    def decode(self, data: bytes, keep_markers: bool) -> DecodedImage:
        image = _open_jpeg(data)
        markers = segments_from_applist(image.applist) if keep_markers else None
        try:
            image.load()
        except _DECODE_ERRORS as exc:
            raise CodecError(f"JPEG decoding failed: {exc}") from exc

        # Pillow re-emits info["comment"] on save; metadata only travels as markers
        image.info.clear()

        if image.mode != "RGB":
            image = image.convert("RGB")

        return DecodedImage(pixels=image, markers=markers)

    def encode(
        self,
        pixels: Image.Image,
        quality: float,
        markers: Optional[Sequence[MarkerSegment]] = None,
    ) -> bytes:
        if pixels.mode != "RGB":
            pixels = pixels.convert("RGB")

        buffer = io.BytesIO()
        try:
            pixels.save(
                buffer,
                format="JPEG",
                quality=pillow_quality(quality),
                optimize=True,
                progressive=True,
            )
        except (OSError, ValueError) as exc:
            raise CodecError(f"JPEG encoding failed: {exc}") from exc

        encoded = buffer.getvalue()
        if markers:
            encoded = splice_marker_segments(encoded, markers)
        return encoded
