"""Configuration for dexview."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from dexview.events.models import ETHER_ADDRESS

logger = logging.getLogger(__name__)


class AssetConfig(BaseModel):
    """How raw integer amounts map to currency and token quantities."""

    ether_address: str = ETHER_ADDRESS
    ether_decimals: int = Field(default=18, ge=0)
    token_decimals: int = Field(default=18, ge=0)
    price_precision: int = Field(default=5, ge=0)


class DisplayConfig(BaseModel):
    """Presentation settings for the derived views."""

    timezone: str = "UTC"
    sell_side_order: Literal["ascending", "descending"] = "ascending"
    candle_interval: int = Field(default=3600, gt=0, description="Bucket size in seconds")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value.upper() == "UTC":
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{value}'") from exc
        return value


class DexviewConfig(BaseModel):
    """Top-level configuration."""

    assets: AssetConfig = Field(default_factory=AssetConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    @classmethod
    def from_toml(cls, path: Path | str) -> DexviewConfig:
        """Load configuration from a TOML file."""
        path = Path(path)
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, explicit_path: str | None = None) -> DexviewConfig | None:
        """Find and load config: explicit path > DEXVIEW_CONFIG env > dexview.toml in cwd.

        Returns None if no config file is found.
        """
        if explicit_path:
            logger.info("Loading config from %s", explicit_path)
            return cls.from_toml(explicit_path)
        env_path = os.environ.get("DEXVIEW_CONFIG")
        if env_path:
            logger.info("Loading config from DEXVIEW_CONFIG=%s", env_path)
            return cls.from_toml(env_path)
        default = Path("dexview.toml")
        if default.exists():
            logger.info("Loading config from %s", default)
            return cls.from_toml(default)
        return None


DEFAULT_CONFIG = DexviewConfig()
