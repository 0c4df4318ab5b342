"""
Configuration for the json-renderer CLI and dev server.

Configuration lives in the `[json_renderer]` table of json-renderer.toml:

    [json_renderer.stream]
    api = "http://127.0.0.1:8787/api/generate"
    timeout = 30

    [json_renderer.server]
    port = 9000
    delay = 0.05

    [json_renderer.logging]
    level = "DEBUG"

Environment variables override the file:
    JSON_RENDERER_API        stream.api
    JSON_RENDERER_LOG_LEVEL  logging.level
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from json_renderer.core.errors import ConfigError

CONFIG_FILENAME = "json-renderer.toml"
CONFIG_TABLE = "json_renderer"

API_ENV_VAR = "JSON_RENDERER_API"
LOG_LEVEL_ENV_VAR = "JSON_RENDERER_LOG_LEVEL"


class StreamConfig(BaseModel):
    """Generator endpoint used by `json-renderer stream`."""

    model_config = ConfigDict(extra="forbid")

    api: str = "http://127.0.0.1:8787/api/generate"
    timeout: float = 60.0
    headers: dict[str, str] = Field(default_factory=dict)


class ServerConfig(BaseModel):
    """Dev replay server."""

    model_config = ConfigDict(extra="forbid")

    host: str = "127.0.0.1"
    port: int = 8787
    delay: float = Field(default=0.0, ge=0.0, description="Seconds between replayed lines")


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: str = "INFO"


class RendererConfig(BaseModel):
    """Complete configuration."""

    model_config = ConfigDict(extra="forbid")

    stream: StreamConfig = Field(default_factory=StreamConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    api = os.environ.get(API_ENV_VAR, "").strip()
    if api:
        data.setdefault("stream", {})["api"] = api

    level = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip()
    if level:
        data.setdefault("logging", {})["level"] = level.upper()

    return data


def load_config(path: Path | None = None) -> RendererConfig:
    """
    Load configuration.

    Args:
        path: Config file; defaults to json-renderer.toml in the current
            directory. A missing file yields the defaults.

    Returns:
        RendererConfig with file values and environment overrides applied

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    toml_path = path if path is not None else Path.cwd() / CONFIG_FILENAME

    data: dict[str, Any] = {}
    if toml_path.exists():
        try:
            with open(toml_path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {toml_path}: {e}") from e
        data = dict(raw.get(CONFIG_TABLE, {}))

    data = _apply_env_overrides(data)

    try:
        return RendererConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {toml_path}: {e}") from e
