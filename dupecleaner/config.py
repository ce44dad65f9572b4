import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dupecleaner.errors import ConfigError

VERSION = "1.0.0"

# === API ENDPOINTS ===
DUPLICATES_ENDPOINT = "/api/duplicates"
ALBUMS_ENDPOINT = "/api/albums"
ASSETS_ENDPOINT = "/api/assets"

# Seconds per HTTP call
DEFAULT_TIMEOUT = 30

CONFIG_FILE = Path("dupecleaner_config.json")

URL_ENV = "IMMICH_URL"
API_KEY_ENV = "IMMICH_API_KEY"


@dataclass(frozen=True)
class Config:
    """
    Settings for one run. Built once at startup and passed explicitly
    to every component; never mutated afterwards.
    """
    url: str = ""
    api_key: str = ""
    auto_delete: bool = False
    dry_run: bool = False
    yes: bool = False
    verbose: bool = False
    timeout: float = DEFAULT_TIMEOUT


def load_user_config(path: Optional[Path] = None) -> dict:
    """
    Load the JSON defaults file (url, api_key, auto_delete, ...).
    The implicit CONFIG_FILE may be missing (empty dict); an explicit path must exist.
    """
    if path is None:
        if not CONFIG_FILE.exists():
            return {}
        path = CONFIG_FILE
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file '{path}' not found")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read config file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{path}' must contain a JSON object")
    return data


def build_config(overrides: dict, file_defaults: Optional[dict] = None, environ=None) -> Config:
    """
    Merge settings with precedence: overrides (CLI) > environment > file > defaults.
    Overrides whose value is None are treated as "not given".
    """
    file_defaults = file_defaults or {}
    environ = os.environ if environ is None else environ

    merged = dict(file_defaults)
    if environ.get(URL_ENV):
        merged["url"] = environ[URL_ENV]
    if environ.get(API_KEY_ENV):
        merged["api_key"] = environ[API_KEY_ENV]
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value

    kwargs = {}
    for key in ("url", "api_key"):
        if key in merged:
            kwargs[key] = str(merged[key])

    # Only real JSON true/false; "false" or "no" must not switch a flag on
    for key in ("auto_delete", "dry_run", "yes", "verbose"):
        if key in merged:
            if not isinstance(merged[key], bool):
                raise ConfigError(f"Invalid value for '{key}': {merged[key]!r}")
            kwargs[key] = merged[key]

    if "timeout" in merged:
        value = merged["timeout"]
        if isinstance(value, bool):
            raise ConfigError(f"Invalid value for 'timeout': {value!r}")
        try:
            kwargs["timeout"] = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for 'timeout': {value!r}") from e

    return validate_config(Config(**kwargs))


def validate_config(config: Config) -> Config:
    """
    Check required settings and return a copy with the URL's trailing slash trimmed.
    """
    if not config.url:
        raise ConfigError("--url is required")
    if not config.api_key:
        raise ConfigError("--api-key is required")
    if config.timeout <= 0:
        raise ConfigError("timeout must be positive")

    return replace(config, url=config.url.rstrip("/"))
