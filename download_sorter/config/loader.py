from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (default config/sorter.yml)
- Validate against config_schema.json shipped next to this module
- Apply defaults for every missing key
- Overlay DOWNLOAD_SORTER_* environment variables
"""

DEFAULT_CONFIG_PATH = Path("config/sorter.yml")
ENV_WORKBOOK = "DOWNLOAD_SORTER_WORKBOOK"
ENV_SHEET = "DOWNLOAD_SORTER_SHEET"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class SorterConfig:
    workbook: str | None
    sheet: str | None  # None = active sheet
    key_column_tokens: tuple[str, ...]
    backup_key: str
    properties_suffix: str

    @staticmethod
    def defaults() -> SorterConfig:
        return SorterConfig(
            workbook=None,
            sheet=None,
            key_column_tokens=("downloads", "month"),
            backup_key="ORIGINAL_DATA_BACKUP",
            properties_suffix=".properties.json",
        )

    def with_env(self, environ: dict[str, str] | None = None) -> SorterConfig:
        """Return a copy with DOWNLOAD_SORTER_WORKBOOK / _SHEET applied (env wins)."""
        env = os.environ if environ is None else environ
        return replace(
            self,
            workbook=env.get(ENV_WORKBOOK) or self.workbook,
            sheet=env.get(ENV_SHEET) or self.sheet,
        )


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: schema file unreadable or data fails validation
            (unknown keys, wrong types, empty token list, ...)
    """
    try:
        text = resources.files("download_sorter.config").joinpath("config_schema.json").read_text(encoding="utf-8")
        schema = json.loads(text)
        jsonschema.validate(data, schema)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> SorterConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    base = SorterConfig.defaults()
    return SorterConfig(
        workbook=data.get("workbook", base.workbook),
        sheet=data.get("sheet", base.sheet),
        key_column_tokens=tuple(data.get("key_column_tokens", base.key_column_tokens)),
        backup_key=data.get("backup_key", base.backup_key),
        properties_suffix=data.get("properties_suffix", base.properties_suffix),
    )
