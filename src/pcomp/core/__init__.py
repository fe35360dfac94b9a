"""Core utilities and shared components for pcomp."""

from .codec import DecodedImage, JpegCodec, MarkerSegment
from .config import CONFIG_FILE_NAME, load_policy, policy_from_mapping
from .discovery import LocalFileDiscoveryService, discover_files
from .logging_config import (
    configure_multiprocessing_logging,
    get_logger,
    setup_logger,
)
from .exceptions import (
    PcompError,
    ConfigError,
    DiscoveryError,
    ImageJobError,
    UnsupportedFormatError,
    CodecError,
    FileIOError,
)
from .jobs import ImageJob, compress_job, open_job, save_job, transform_job
from .models import Compressed, Failed, JobOutcome, RunPolicy, RunSummary
from .pipeline import StageKind, TransformStage, build_pipeline, run_pipeline
from .reporter import Reporter

__all__ = [
    "RunPolicy",
    "Compressed",
    "Failed",
    "JobOutcome",
    "RunSummary",
    "ImageJob",
    "open_job",
    "compress_job",
    "save_job",
    "transform_job",
    "JpegCodec",
    "DecodedImage",
    "MarkerSegment",
    "CONFIG_FILE_NAME",
    "load_policy",
    "policy_from_mapping",
    "LocalFileDiscoveryService",
    "discover_files",
    "StageKind",
    "TransformStage",
    "build_pipeline",
    "run_pipeline",
    "Reporter",
    "setup_logger",
    "get_logger",
    "configure_multiprocessing_logging",
    "PcompError",
    "ConfigError",
    "DiscoveryError",
    "ImageJobError",
    "UnsupportedFormatError",
    "CodecError",
    "FileIOError",
]
