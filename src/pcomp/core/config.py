"""Loading and validation of the run policy."""

import tomllib
from pathlib import Path
from typing import Any, Mapping, Union

from pydantic import ValidationError

from .exceptions import ConfigError
from .logging_config import get_logger
from .models import RunPolicy

CONFIG_FILE_NAME = "pcomp.toml"


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail["loc"]) or "<root>"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def policy_from_mapping(data: Mapping[str, Any]) -> RunPolicy:
    """
    Validate an already parsed configuration mapping.

    Raises:
        ConfigError: If a section or field is missing, unknown or out of domain.
    """
    try:
        return RunPolicy.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid configuration: {_format_validation_error(exc)}"
        ) from exc


def load_policy(path: Union[str, Path] = CONFIG_FILE_NAME) -> RunPolicy:
    """
    Read a TOML configuration file and resolve it into a RunPolicy.

    Args:
        path: Location of the configuration file (defaults to pcomp.toml
            in the working directory)

    Returns:
        The immutable policy shared by every worker of the run

    Raises:
        ConfigError: If the file is missing, unreadable, malformed or invalid.
    """
    logger = get_logger("pcomp.config")
    config_path = Path(path)

    try:
        with config_path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {config_path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed configuration file {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {config_path}: {exc}") from exc

    policy = policy_from_mapping(data)
    logger.debug(f"Loaded run policy from {config_path.resolve()}")
    return policy
