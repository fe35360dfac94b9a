"""pcomp: batch JPEG re-compression pipeline."""

__version__ = "0.1.0"
