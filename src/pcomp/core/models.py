"""Shared data models for the pcomp pipeline."""

from pathlib import Path
from typing import Annotated, List, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PolicySection(BaseModel):
    """Base for every configuration section: immutable and strict about keys."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class GeneralSection(PolicySection):
    """Settings that apply to the whole run."""

    jpeg_quality: float = Field(gt=0, le=100, allow_inf_nan=False)
    worker_count: int = Field(
        gt=0, validation_alias=AliasChoices("worker_count", "num_threads")
    )
    recurse_subdirectories: bool = Field(
        validation_alias=AliasChoices("recurse_subdirectories", "read_sub_dir")
    )
    overwrite_in_place: bool = Field(
        validation_alias=AliasChoices("overwrite_in_place", "overwrite_existing_files")
    )
    preserve_metadata: bool = Field(
        validation_alias=AliasChoices("preserve_metadata", "keep_original_exif")
    )
    worker_mode: Literal["thread", "process"] = "thread"


class ResizeSection(PolicySection):
    enabled: bool = Field(validation_alias=AliasChoices("enabled", "enable"))
    long_side_target: int = Field(
        gt=0, validation_alias=AliasChoices("long_side_target", "long_side_length")
    )


class SharpenSection(PolicySection):
    enabled: bool = Field(validation_alias=AliasChoices("enabled", "enable"))
    sigma: float = Field(ge=0, allow_inf_nan=False)
    threshold: int = Field(ge=0)


class BrightenSection(PolicySection):
    enabled: bool = Field(validation_alias=AliasChoices("enabled", "enable"))
    delta: int = Field(validation_alias=AliasChoices("delta", "setting"))


class ContrastSection(PolicySection):
    enabled: bool = Field(validation_alias=AliasChoices("enabled", "enable"))
    delta: float = Field(
        allow_inf_nan=False, validation_alias=AliasChoices("delta", "setting")
    )


class RunPolicy(PolicySection):
    """Fully resolved, immutable configuration for one run."""

    general: GeneralSection
    resize: ResizeSection
    sharpen: SharpenSection
    brighten: BrightenSection
    contrast: ContrastSection

    @property
    def jpeg_quality(self) -> float:
        return self.general.jpeg_quality

    @property
    def worker_count(self) -> int:
        return self.general.worker_count

    @property
    def recurse_subdirectories(self) -> bool:
        return self.general.recurse_subdirectories

    @property
    def overwrite_in_place(self) -> bool:
        return self.general.overwrite_in_place

    @property
    def preserve_metadata(self) -> bool:
        return self.general.preserve_metadata

    @property
    def worker_mode(self) -> str:
        return self.general.worker_mode


class Compressed(BaseModel):
    """Outcome of an image that was re-encoded and written."""

    status: Literal["compressed"] = "compressed"
    file_name: str
    source_path: Path
    output_path: Path
    ratio_percent: int = Field(ge=0)
    duration: float = 0.0


class Failed(BaseModel):
    """Outcome of an image whose processing raised a per-job error."""

    status: Literal["failed"] = "failed"
    file_name: str
    source_path: Path
    error_kind: str
    message: str
    duration: float = 0.0


JobOutcome = Annotated[Union[Compressed, Failed], Field(discriminator="status")]


class RunSummary(BaseModel):
    """Aggregate result of a run."""

    total: int = 0
    compressed: int = 0
    failed: int = 0
    elapsed_seconds: float = 0.0
    outcomes: List[JobOutcome] = Field(default_factory=list)
