"""
Config file: ``~/.tinyhatchet.config`` (YAML).

The file keeps the lower-cased key names earlier clients wrote
(``serverurl``, ``emailaddress``, ``debugpath``) so existing files keep
working.  A missing file is not an error: defaults are used and the file is
created on shutdown.

Environment overrides (applied after the file is read)::

    TINYHATCHET_CONFIG       path of the config file
    TINYHATCHET_SERVER_URL   server base URL
    TINYHATCHET_DEBUG_PATH   debug log file
    TINYHATCHET_LOG_LEVEL    log level for the debug log

Overrides are not written back: a value still equal to its override is saved
with what the file held.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from tinyhatchet.core.exceptions import ConfigError

logger = structlog.get_logger()

CONFIG_FILENAME = ".tinyhatchet.config"
DEFAULT_SERVER_URL = "https://tinyhatchet.com"

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# file key -> Config attribute
_KEYS: dict[str, str] = {
    "serverurl": "server_url",
    "emailaddress": "email_address",
    "debugpath": "debug_path",
    "loglevel": "log_level",
}

# environment variable -> Config attribute
_ENV_OVERRIDES: dict[str, str] = {
    "TINYHATCHET_SERVER_URL": "server_url",
    "TINYHATCHET_DEBUG_PATH": "debug_path",
    "TINYHATCHET_LOG_LEVEL": "log_level",
}


@dataclass
class Config:
    server_url: str = ""
    email_address: str = ""
    debug_path: str = ""
    log_level: str = "INFO"
    # attribute -> (value from the file, value from the environment)
    overrides: dict[str, tuple[str, str]] = field(default_factory=dict, repr=False, compare=False)

    def to_dict(self) -> dict[str, str]:
        """File contents to write back.

        An attribute still holding its environment override is written with
        the value the file had, so overrides never leak into the file.
        """
        out: dict[str, str] = {}
        for key, attr in _KEYS.items():
            value = getattr(self, attr)
            if attr in self.overrides:
                file_value, env_value = self.overrides[attr]
                if value == env_value:
                    value = file_value
            out[key] = value
        return out


def default_config_path() -> Path:
    env = os.environ.get("TINYHATCHET_CONFIG", "")
    if env:
        return Path(env).expanduser()
    return Path.home() / CONFIG_FILENAME


def _apply_env_overrides(config: Config) -> None:
    for name, attr in _ENV_OVERRIDES.items():
        value = os.environ.get(name, "")
        if not value:
            continue
        if attr == "log_level":
            value = value.upper()
        config.overrides[attr] = (getattr(config, attr), value)
        setattr(config, attr, value)


def _validate(config: Config) -> None:
    config.log_level = config.log_level.upper()
    if config.log_level not in _LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level {config.log_level!r}; expected one of {sorted(_LOG_LEVELS)}"
        )
    if config.server_url and not config.server_url.startswith(("http://", "https://")):
        raise ConfigError(f"Server URL must start with http:// or https://: {config.server_url!r}")


def _from_mapping(data: dict[str, Any]) -> Config:
    config = Config()
    for key, value in data.items():
        attr = _KEYS.get(str(key).lower())
        if attr is None:
            logger.debug("config_unknown_key", key=key)
            continue
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(f"Config key {key!r} must be a string, got {type(value).__name__}")
        setattr(config, attr, value)
    return config


def load_config(path: Path | None = None) -> Config:
    """Load the config file at *path* (default: :func:`default_config_path`).

    Returns defaults when the file does not exist.  Raises
    :class:`ConfigError` when it exists but cannot be read or parsed.
    """
    path = path or default_config_path()
    data: Any = {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("config_not_found", path=str(path))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    else:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

    config = _from_mapping(data)
    _apply_env_overrides(config)
    _validate(config)
    logger.debug("config_loaded", path=str(path), server_url=config.server_url)
    return config


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write *config* to *path* with owner-only permissions; return the path."""
    path = path or default_config_path()
    body = yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
        path.chmod(0o600)
    except OSError as exc:
        raise ConfigError(f"Cannot write config file {path}: {exc}") from exc
    logger.debug("config_saved", path=str(path))
    return path
