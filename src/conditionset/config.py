"""Engine configuration.

Settings come from an optional TOML file's ``[conditionset]`` table,
then environment overrides::

    [conditionset]
    random_seed = 42
    log_level = "DEBUG"
    strict = true

Environment variables ``CONDITIONSET_SEED`` and ``CONDITIONSET_LOG_LEVEL``
take precedence over the file.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from conditionset import randomness
from conditionset.errors import ConfigError

logger = logging.getLogger(__name__)

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

ENV_SEED = "CONDITIONSET_SEED"
ENV_LOG_LEVEL = "CONDITIONSET_LOG_LEVEL"


class EngineConfig(BaseModel):
    """Runtime settings for loading and evaluating condition sets."""

    random_seed: int | None = None
    log_level: str = "WARNING"
    strict: bool = False  # treat warnings from `check` as errors

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LEVELS)}, got {value!r}")
        return level


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> EngineConfig:
    """Build an EngineConfig from a TOML file, the environment and ``overrides``.

    Later sources win: file, then environment, then ``overrides``
    (used for command-line flags).

    Raises:
        ConfigError: If the file is unreadable or a value is invalid.
    """
    values: dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        section = data.get("conditionset", {})
        if not isinstance(section, dict):
            raise ConfigError(f"{path}: [conditionset] must be a table")
        values.update(section)

    if ENV_SEED in os.environ:
        values["random_seed"] = os.environ[ENV_SEED]
    if ENV_LOG_LEVEL in os.environ:
        values["log_level"] = os.environ[ENV_LOG_LEVEL]
    if overrides:
        values.update(overrides)

    try:
        return EngineConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def configure(config: EngineConfig) -> None:
    """Apply a config: seed the shared random source, set the package log level."""
    logging.getLogger("conditionset").setLevel(config.log_level)
    if config.random_seed is not None:
        randomness.seed(config.random_seed)
        logger.debug("Seeded random source with %d", config.random_seed)
