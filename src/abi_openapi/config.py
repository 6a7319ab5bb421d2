"""Settings for abi-openapi, read from an optional YAML file.

Precedence: CLI options > config file > defaults.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from abi_openapi.assembler import DEFAULT_TITLE, OverloadPolicy
from abi_openapi.errors import ConfigError
from abi_openapi.mapper import DEFAULT_MAX_DEPTH

DEFAULT_CONFIG_FILE = Path("abi-openapi.yaml")


class Settings(BaseModel):
    title: str = DEFAULT_TITLE
    artifacts_dir: Path = Path("artifacts")
    output_dir: Path = Path("docs")
    format: Literal["json", "yaml"] = "json"
    overloads: OverloadPolicy = OverloadPolicy.LAST_WINS
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    host: str = "127.0.0.1"
    port: int = 3000


def load_settings(config_path: Path | None = None, **overrides: Any) -> Settings:
    """Load settings from ``config_path`` (or ./abi-openapi.yaml) and apply overrides.

    Overrides whose value is None are ignored so unset CLI options keep
    the configured value.
    """
    path = config_path or DEFAULT_CONFIG_FILE
    data: dict[str, Any] = {}
    if config_path is not None or path.exists():
        data = _read_yaml(path)

    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(loaded).__name__}")
    # Accept both snake_case and kebab-case keys.
    return {str(k).replace("-", "_"): v for k, v in loaded.items()}
