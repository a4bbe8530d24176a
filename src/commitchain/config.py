"""Runtime settings for commitchain."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from commitchain.models.commit import DEFAULT_DATE_FORMAT

ENV_PREFIX = "COMMITCHAIN_"
CONFIG_FILE_ENV = f"{ENV_PREFIX}CONFIG_FILE"


class JsonFileSettingsSource(PydanticBaseSettingsSource):
    """Load settings from a JSON object file."""

    def __init__(self, settings_cls, json_file: Optional[Path]):
        super().__init__(settings_cls)
        self.json_file = json_file
        self._data: Optional[Dict[str, Any]] = None

    def _read(self) -> Dict[str, Any]:
        if self._data is None:
            self._data = {}
            if self.json_file is not None:
                loaded = json.loads(Path(self.json_file).read_text(encoding="utf-8"))
                if not isinstance(loaded, dict):
                    raise ValueError(
                        f"Settings file {self.json_file} must contain a JSON object"
                    )
                self._data = loaded
        return self._data

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> Tuple[Any, str, bool]:
        data = self._read()
        if field_name in data:
            return data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> Dict[str, Any]:
        fields = self.settings_cls.model_fields
        return {name: value for name, value in self._read().items() if name in fields}


class ChainSettings(BaseSettings):
    """Settings for formatting, logging and the CLI.

    Precedence: keyword arguments, then ``COMMITCHAIN_*`` environment
    variables, then the JSON ``config_file``, then defaults.
    """

    config_file: Optional[Path] = None
    timezone: Optional[str] = None
    date_format: str = DEFAULT_DATE_FORMAT
    log_level: str = "WARNING"
    commit_spacing_ms: int = 2

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """Add the JSON settings file below environment variables."""
        config_file = init_settings.init_kwargs.get("config_file")
        if config_file is None:
            config_file = os.environ.get(CONFIG_FILE_ENV) or None

        return (
            init_settings,
            env_settings,
            JsonFileSettingsSource(settings_cls, config_file),
        )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {value}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("commit_spacing_ms")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("commit_spacing_ms cannot be negative")
        return value

    def tzinfo(self) -> Optional[ZoneInfo]:
        """Zone to format dates in, or None for local time."""
        return ZoneInfo(self.timezone) if self.timezone else None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ChainSettings":
        """Build settings from an optional JSON file and the environment."""
        if path is None:
            return cls()
        return cls(config_file=path)
