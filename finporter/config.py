"""
Configuration models and YAML I/O for finporter.

This module defines the Pydantic models that map 1:1 to a finporter
YAML config file, plus helpers for loading and saving it.

Key models:
- PorterConfig: Top-level config (decode + prospect + output format).
- DecodeOptions: Defaults applied to naked vendor dates (time of day,
  time zone).
- ProspectOptions: How much of the input detection inspects, and which
  source formats are candidates.

Key functions:
- load_config(path) -> PorterConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

Why Pydantic + YAML:
- Pydantic rejects a malformed time of day or an unknown time zone
  before any document is decoded, with a clear message.
- YAML is human-editable and round-trips through model_dump().
"""

from __future__ import annotations

import logging
import re
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator

from finporter.exceptions import ConfigValidationError
from finporter.schemas import SourceFormat

logger = logging.getLogger(__name__)

_TIME_OF_DAY_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class DecodeOptions(BaseModel):
    """Defaults used to resolve dates that carry no time of day or zone."""

    time_of_day: str = Field(
        "12:00", description="Default HH:MM applied to naked vendor dates"
    )
    time_zone: str | None = Field(
        None,
        description="IANA zone for naked vendor dates; null means process-local",
    )

    @field_validator("time_of_day")
    @classmethod
    def _check_time_of_day(cls, value: str) -> str:
        if not _TIME_OF_DAY_RE.match(value):
            raise ValueError(f"time_of_day must be HH:MM (24-hour), got '{value}'")
        return value

    @field_validator("time_zone")
    @classmethod
    def _check_time_zone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone '{value}'") from exc
        return value

    def zone(self) -> tzinfo | None:
        """The configured zone, or ``None`` for the process-local zone."""
        return ZoneInfo(self.time_zone) if self.time_zone else None


class ProspectOptions(BaseModel):
    """Detection settings."""

    prefix_bytes: int = Field(
        8192, gt=0, description="Number of leading bytes handed to each importer's detect()"
    )
    source_formats: list[SourceFormat] = Field(
        default_factory=lambda: list(SourceFormat),
        description="Candidate source formats considered during prospecting",
    )


class PorterConfig(BaseModel):
    """Top-level configuration for finporter."""

    decode: DecodeOptions = Field(default_factory=DecodeOptions)
    prospect: ProspectOptions = Field(default_factory=ProspectOptions)
    output_format: SourceFormat = Field(
        SourceFormat.CSV, description="Format written by convert()"
    )


def load_config(path: str | Path) -> PorterConfig:
    """Load and validate a finporter YAML config.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return PorterConfig.model_validate(raw)


def save_config(config: PorterConfig, path: str | Path) -> None:
    """Serialize a PorterConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# finporter configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
