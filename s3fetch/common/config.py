from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

# leading integer prefix, e.g. "12abc" -> 12
_PORT_PREFIX = re.compile(r"[+-]?[0-9]+")

DEFAULT_PORT = 8080
LOG_FORMATS: tuple[str, ...] = ("json", "plain")

REQUIRED_STORAGE_VARIABLES: tuple[str, ...] = (
    "AWS_REGION",
    "S3_BUCKET_NAME",
    "S3_FILE_NAME",
)


class ConfigError(ValueError):
    """Raised when the process environment does not yield a valid configuration."""


def load_env_file(path: Path = ENV_FILE) -> None:
    """Populate ``os.environ`` from a ``KEY=VALUE`` file without overriding."""
    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _parse_port(value: str | None) -> int:
    if not value:
        return DEFAULT_PORT
    match = _PORT_PREFIX.match(value.strip())
    if match is None:
        raise ConfigError("PORT must be a valid number")
    return int(match.group(0))


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if value is None or value.strip() == "":
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


@dataclass(frozen=True, slots=True)
class StorageSettings:
    region: str
    bucket_name: str
    object_key: str
    endpoint_url: str | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    storage: StorageSettings
    port: int = DEFAULT_PORT
    enable_metrics: bool = True
    log_format: str = "json"


def load_config(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from the environment.

    Validation is fail-fast: ``PORT`` first, then the required storage
    variables in the order ``AWS_REGION``, ``S3_BUCKET_NAME``,
    ``S3_FILE_NAME``.

    Raises:
        ConfigError: If ``PORT`` is not an integer or a required variable is
            missing or blank.
    """
    env = os.environ if environ is None else environ

    port = _parse_port(env.get("PORT"))
    region, bucket_name, object_key = (
        _require(env, name) for name in REQUIRED_STORAGE_VARIABLES
    )

    endpoint_url = (env.get("S3_ENDPOINT_URL") or "").strip() or None

    log_format = (env.get("LOG_FORMAT") or "json").strip().lower()
    if log_format not in LOG_FORMATS:
        raise ConfigError(
            f"LOG_FORMAT must be one of: {', '.join(LOG_FORMATS)}"
        )

    return Settings(
        port=port,
        storage=StorageSettings(
            region=region,
            bucket_name=bucket_name,
            object_key=object_key,
            endpoint_url=endpoint_url,
        ),
        enable_metrics=_as_bool(env.get("ENABLE_METRICS"), True),
        log_format=log_format,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_config()
