"""Configuration loader for scholia.toml."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .adapters.local_backend import DEFAULT_LATENCY_MS, DEFAULT_STORAGE_KEY
from .adapters.remote_backend import DEFAULT_TIMEOUT
from .core.errors import ConfigError
from .logging_config import LogConfig, LogFormat


@dataclass
class ApiConfig:
    """Remote notes API. An empty base_url selects the local backend."""
    base_url: str = ""
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class LocalConfig:
    """Local blob persistence."""
    data_dir: Path = Path(".scholia")
    storage_key: str = DEFAULT_STORAGE_KEY
    latency_ms: int = DEFAULT_LATENCY_MS


@dataclass
class ScholiaConfig:
    """Complete scholia configuration."""
    api: ApiConfig = field(default_factory=ApiConfig)
    local: LocalConfig = field(default_factory=LocalConfig)
    logging: LogConfig = field(default_factory=LogConfig)

    @property
    def use_remote(self) -> bool:
        return bool(self.api.base_url.strip())


def _env(name: str, *fallbacks: str) -> str | None:
    for key in (name, *fallbacks):
        value = os.environ.get(key)
        if value:
            return value
    return None


def _number(kind: type, value: Any, name: str) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from e


def load_config(config_path: Path | None = None) -> ScholiaConfig:
    """
    Load configuration from scholia.toml, then apply environment overrides.

    Search order:
    1. config_path (if provided)
    2. cwd/scholia.toml

    Environment (wins over the file):
        SCHOLIA_API_BASE / SCHOLIA_BACKEND_URL, SCHOLIA_API_TOKEN,
        SCHOLIA_LATENCY_MS, SCHOLIA_DATA_DIR, SCHOLIA_LOG_LEVEL,
        SCHOLIA_LOG_FORMAT
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / "scholia.toml")

    for path in search_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    toml_data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid config file {path}: {e}") from e
            break

    api_data = toml_data.get("api", {})
    api_config = ApiConfig(
        base_url=_env("SCHOLIA_API_BASE", "SCHOLIA_BACKEND_URL") or api_data.get("base_url", ""),
        token=_env("SCHOLIA_API_TOKEN") or api_data.get("token"),
        timeout=_number(float, api_data.get("timeout", DEFAULT_TIMEOUT), "api.timeout"),
    )

    local_data = toml_data.get("local", {})
    latency = _env("SCHOLIA_LATENCY_MS")
    local_config = LocalConfig(
        data_dir=Path(_env("SCHOLIA_DATA_DIR") or local_data.get("data_dir", ".scholia")),
        storage_key=local_data.get("storage_key", DEFAULT_STORAGE_KEY),
        latency_ms=_number(
            int,
            latency if latency is not None else local_data.get("latency_ms", DEFAULT_LATENCY_MS),
            "SCHOLIA_LATENCY_MS" if latency is not None else "local.latency_ms",
        ),
    )

    log_data = toml_data.get("logging", {})
    log_format = (_env("SCHOLIA_LOG_FORMAT") or log_data.get("format", "console")).lower()
    log_config = LogConfig(
        level=(_env("SCHOLIA_LOG_LEVEL") or log_data.get("level", "WARNING")).upper(),
        format=LogFormat.JSON if log_format == "json" else LogFormat.CONSOLE,
    )

    return ScholiaConfig(api=api_config, local=local_config, logging=log_config)
