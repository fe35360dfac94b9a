"""Testing utilities and fakes for pcomp."""

from .fakes import (
    FailingCodec,
    FakeLogger,
    RecordingReporter,
    create_jpeg_with_markers,
    create_mpo_image,
    create_test_image,
    write_test_tree,
)

__all__ = [
    "FailingCodec",
    "FakeLogger",
    "RecordingReporter",
    "create_jpeg_with_markers",
    "create_mpo_image",
    "create_test_image",
    "write_test_tree",
]
