"""Pixel level transforms applied by the pipeline stages."""

from typing import Tuple

import numpy as np
from PIL import Image, ImageFilter

CHANNEL_MIN = 0
CHANNEL_MAX = 255
MID_GRAY = 127.5


def scaled_size(size: Tuple[int, int], long_side_target: int) -> Tuple[int, int]:
    """
    Compute the dimensions whose long side equals ``long_side_target``.

    The short side is ``round(short * target / long)``, never below one pixel.

    Args:
        size: Current ``(width, height)``
        long_side_target: Desired length of the longer side

    Returns:
        New ``(width, height)`` preserving the aspect ratio
    """
    width, height = size
    long_side = max(width, height)
    scale = long_side_target / long_side
    if width >= height:
        return long_side_target, max(1, round(height * scale))
    return max(1, round(width * scale)), long_side_target


def resize_long_side(img: Image.Image, long_side_target: int) -> Image.Image:
    """Resize with Lanczos so the longer side equals the target."""
    return img.resize(scaled_size(img.size, long_side_target), Image.Resampling.LANCZOS)


def sharpen(img: Image.Image, sigma: float, threshold: int) -> Image.Image:
    """
    Apply an unsharp mask once.

    Pillow's radius is the standard deviation of the Gaussian blur; the
    full difference to the blurred image is added back (percent=100)
    wherever it exceeds ``threshold``.
    """
    return img.filter(ImageFilter.UnsharpMask(radius=sigma, percent=100, threshold=threshold))


def brighten(img: Image.Image, delta: int) -> Image.Image:
    """Add ``delta`` to every channel, saturating at the channel bounds."""
    # Anything beyond +/-255 saturates the same way
    delta = max(-CHANNEL_MAX, min(CHANNEL_MAX, int(delta)))
    pixels = np.asarray(img, dtype=np.int16)
    result = np.clip(pixels + delta, CHANNEL_MIN, CHANNEL_MAX).astype(np.uint8)
    return Image.fromarray(result)


def adjust_contrast(img: Image.Image, delta: float) -> Image.Image:
    """
    Scale each channel's deviation from mid-gray by ``1 + delta / 100``.

    Results are rounded and saturated at the channel bounds.
    """
    factor = 1.0 + float(delta) / 100.0
    pixels = np.asarray(img, dtype=np.float64)
    with np.errstate(over="ignore", invalid="ignore"):
        scaled = (pixels - MID_GRAY) * factor + MID_GRAY
    result = np.clip(np.rint(scaled), CHANNEL_MIN, CHANNEL_MAX).astype(np.uint8)
    return Image.fromarray(result)
