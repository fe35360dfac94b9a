"""Custom exceptions for the pcomp pipeline."""

from __future__ import annotations


class PcompError(Exception):
    """Base exception for all pcomp errors."""

    kind = "pcomp"


class ConfigError(PcompError):
    """Error raised when the run policy cannot be loaded or validated."""

    kind = "config"


class DiscoveryError(PcompError):
    """Error raised when a source directory cannot be listed."""

    kind = "discovery"


class ImageJobError(PcompError):
    """Error raised when processing a single image fails."""

    kind = "job"


class UnsupportedFormatError(ImageJobError):
    """Error raised for files without a JPEG extension."""

    kind = "unsupported_format"


class CodecError(ImageJobError):
    """Error raised when decoding or encoding a JPEG fails."""

    kind = "codec"


class FileIOError(ImageJobError):
    """Error raised when reading a source or writing an output fails."""

    kind = "io"
