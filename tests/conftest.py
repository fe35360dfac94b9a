"""Shared fixtures for the pcomp test suite."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import pytest

from pcomp.core.models import RunPolicy

BASE_POLICY: Dict[str, Dict[str, Any]] = {
    "general": {
        "jpeg_quality": 85.0,
        "worker_count": 2,
        "recurse_subdirectories": False,
        "overwrite_in_place": False,
        "preserve_metadata": False,
    },
    "resize": {"enabled": False, "long_side_target": 50},
    "sharpen": {"enabled": False, "sigma": 1.0, "threshold": 2},
    "brighten": {"enabled": False, "delta": 10},
    "contrast": {"enabled": False, "delta": 10.0},
}

BASE_TOML = """\
[general]
jpeg_quality = 85.0
worker_count = 2
recurse_subdirectories = false
overwrite_in_place = false
preserve_metadata = false

[resize]
enabled = false
long_side_target = 50

[sharpen]
enabled = false
sigma = 1.0
threshold = 2

[brighten]
enabled = false
delta = 10

[contrast]
enabled = false
delta = 10.0
"""


def build_policy_data(**sections: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Copy of BASE_POLICY with per-section field overrides merged in."""
    data = copy.deepcopy(BASE_POLICY)
    for section, overrides in sections.items():
        data[section].update(overrides)
    return data


@pytest.fixture
def policy_data():
    return build_policy_data


@pytest.fixture
def make_policy():
    """Factory fixture: make_policy(general={...}, resize={...}) -> RunPolicy."""

    def _make(**sections: Dict[str, Any]) -> RunPolicy:
        return RunPolicy.model_validate(build_policy_data(**sections))

    return _make


@pytest.fixture
def policy(make_policy) -> RunPolicy:
    return make_policy()


@pytest.fixture
def write_config():
    """Factory fixture writing a pcomp.toml into a directory."""

    def _write(directory: Path, text: str = BASE_TOML) -> Path:
        config_path = Path(directory) / "pcomp.toml"
        config_path.write_text(text)
        return config_path

    return _write


@pytest.fixture
def base_toml() -> str:
    return BASE_TOML


@pytest.fixture
def pcomp_caplog(caplog):
    """caplog wired to the non-propagating ``pcomp`` logger tree."""
    logger = logging.getLogger("pcomp")
    logger.addHandler(caplog.handler)
    previous_level = logger.level
    logger.setLevel(logging.DEBUG)
    yield caplog
    logger.removeHandler(caplog.handler)
    logger.setLevel(previous_level)
