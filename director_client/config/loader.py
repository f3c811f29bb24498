"""
Director config loading.

Priority:
1. Explicit overrides passed to ``load_director_config``/``load_log_settings``
2. Environment variables (DIRECTOR_*, DIRECTOR_LOG_*)
3. Config file (~/.director_client/config.json); logging settings live
   under its "logging" key
"""
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from director_client.config.constants import ENV_PREFIX, LOG_ENV_PREFIX
from director_client.config.models import DirectorConfig, LogSettings
from director_client.core.exceptions import ConfigurationError
from director_client.utils.logger import logger

CONFIG_FILE = Path.home() / ".director_client" / "config.json"

_ENV_FIELDS = (
    "url",
    "ca_cert",
    "verify_tls",
    "username",
    "password",
    "token",
    "connect_timeout",
    "read_timeout",
    "task_poll_interval",
    "task_max_wait",
    "download_chunk_size",
    "context_id",
)

# DIRECTOR_LOG_<suffix> -> LogSettings field
_LOG_ENV_FIELDS = {
    "DIR": "log_dir",
    "FILE_NAME": "file_name",
    "LEVEL": "console_level",
    "FILE_LEVEL": "file_level",
    "CONSOLE": "console_enabled",
    "JSON": "json_logs",
    "ROTATION": "rotation",
    "RETENTION": "retention",
    "COMPRESSION": "compression",
}

ModelT = TypeVar("ModelT", bound=BaseModel)


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigurationError(
            f"Reading director config file '{path}': {e}", {"path": str(path)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Director config file '{path}' must contain a JSON object", {"path": str(path)}
        )
    return data


def _read_env() -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for name in _ENV_FIELDS:
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is None:
            continue
        if name == "verify_tls":
            data[name] = value.lower() in ("1", "true", "yes", "on")
        else:
            # pydantic coerces numeric strings
            data[name] = value
    return data


def _read_log_env() -> Dict[str, Any]:
    # booleans ("true", "0", "on", ...) are coerced by pydantic
    return {
        field: os.environ[f"{LOG_ENV_PREFIX}{suffix}"]
        for suffix, field in _LOG_ENV_FIELDS.items()
        if f"{LOG_ENV_PREFIX}{suffix}" in os.environ
    }


def _build(model: Type[ModelT], data: Dict[str, Any], what: str) -> ModelT:
    try:
        return model(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid {what} configuration: {e.error_count()} error(s)",
            {"errors": [err["loc"] for err in e.errors()]},
        ) from e


def load_director_config(
    config_file: Optional[Path] = None,
    **overrides: Any,
) -> DirectorConfig:
    """
    Build a DirectorConfig from file, environment and overrides.

    Args:
        config_file: Optional JSON config path (default: ~/.director_client/config.json)
        **overrides: Field values that win over everything else

    Returns:
        Validated DirectorConfig

    Raises:
        ConfigurationError: If the file is unreadable or values are invalid
    """
    data = _read_config_file(config_file or CONFIG_FILE)
    data.pop("logging", None)
    data.update(_read_env())
    data.update({k: v for k, v in overrides.items() if v is not None})

    config = _build(DirectorConfig, data, "director")
    logger.debug(f"Loaded director config for {config.url}")
    return config


def load_log_settings(
    config_file: Optional[Path] = None,
    **overrides: Any,
) -> LogSettings:
    """
    Build LogSettings from the "logging" object of the config file,
    DIRECTOR_LOG_* variables and overrides.

    Raises:
        ConfigurationError: If the file is unreadable or values are invalid
    """
    path = config_file or CONFIG_FILE
    data = _read_config_file(path).get("logging") or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"'logging' in director config file '{path}' must be a JSON object", {"path": str(path)}
        )

    data = {**data, **_read_log_env()}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return _build(LogSettings, data, "logging")
