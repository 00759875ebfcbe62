from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from airsense_core.logging import LOG_LEVEL_ENV

DEFAULT_UNIT = "µg/m³"
DEFAULT_HOURS_PER_DAY = 24


class ReportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    unit: str = DEFAULT_UNIT
    hours_per_day: int = Field(default=DEFAULT_HOURS_PER_DAY, ge=1)


class ObservationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value_field: str = Field(default="pm25", min_length=1)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class OutputsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tables_format: Literal["csv", "parquet"] = "csv"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    report: ReportConfig = Field(default_factory=ReportConfig)
    observations: ObservationConfig = Field(default_factory=ObservationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def load_config(path: Path | None = None) -> AppConfig:
    """Load YAML config; without an explicit path a missing default file means built-in defaults."""
    if path is not None:
        data = _read_yaml(path)
    elif DEFAULT_CONFIG_PATH.exists():
        data = _read_yaml(DEFAULT_CONFIG_PATH)
    else:
        data = {}

    env_level = os.getenv(LOG_LEVEL_ENV)
    if env_level:
        logging_data = dict(data.get("logging") or {})
        logging_data["level"] = env_level.strip().upper()
        data["logging"] = logging_data
    return AppConfig.model_validate(data)
