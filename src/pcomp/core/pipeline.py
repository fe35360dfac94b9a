"""Ordered, independently toggleable transform stages."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Tuple

from PIL import Image

from .image_utils import adjust_contrast, brighten, resize_long_side, sharpen
from .models import (
    BrightenSection,
    ContrastSection,
    PolicySection,
    ResizeSection,
    RunPolicy,
    SharpenSection,
)


class StageKind(str, Enum):
    """Transform stages, declared in application order."""

    RESIZE = "resize"
    SHARPEN = "sharpen"
    BRIGHTEN = "brighten"
    CONTRAST = "contrast"


STAGE_ORDER: Tuple[StageKind, ...] = tuple(StageKind)


@dataclass(frozen=True)
class TransformStage:
    """A stage of the pipeline with its enable flag and parameters."""

    kind: StageKind
    enabled: bool
    params: PolicySection


def _apply_resize(img: Image.Image, params: ResizeSection) -> Image.Image:
    return resize_long_side(img, params.long_side_target)


def _apply_sharpen(img: Image.Image, params: SharpenSection) -> Image.Image:
    return sharpen(img, params.sigma, params.threshold)


def _apply_brighten(img: Image.Image, params: BrightenSection) -> Image.Image:
    return brighten(img, params.delta)


def _apply_contrast(img: Image.Image, params: ContrastSection) -> Image.Image:
    return adjust_contrast(img, params.delta)


STAGE_HANDLERS: Dict[StageKind, Callable[[Image.Image, PolicySection], Image.Image]] = {
    StageKind.RESIZE: _apply_resize,
    StageKind.SHARPEN: _apply_sharpen,
    StageKind.BRIGHTEN: _apply_brighten,
    StageKind.CONTRAST: _apply_contrast,
}


def build_pipeline(policy: RunPolicy) -> Tuple[TransformStage, ...]:
    """Build the stages for a policy, always in STAGE_ORDER."""
    stages = []
    for kind in STAGE_ORDER:
        section = getattr(policy, kind.value)
        stages.append(TransformStage(kind=kind, enabled=section.enabled, params=section))
    return tuple(stages)


def apply_stage(img: Image.Image, stage: TransformStage) -> Image.Image:
    """Apply one stage; a disabled stage returns the image untouched."""
    if not stage.enabled:
        return img
    return STAGE_HANDLERS[stage.kind](img, stage.params)


def run_pipeline(img: Image.Image, stages: Iterable[TransformStage]) -> Image.Image:
    for stage in stages:
        img = apply_stage(img, stage)
    return img
