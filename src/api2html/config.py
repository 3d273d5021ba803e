from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from .constraint import DEFAULT_CONFIG_PATH, DEFAULT_THEME
from .errors import InvalidConfigurationError


@dataclass(slots=True)
class DefaultsConfig:
    theme: str = DEFAULT_THEME
    search: bool = True
    languages: tuple[str, ...] = ()
    summary: bool = False
    raw: bool = False
    omit_body: bool = False


@dataclass(slots=True)
class RuntimeConfig:
    log_file: Path | None = None
    max_file_size_mb: int = 25


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    enable_local_api: bool = False


@dataclass(slots=True)
class AppConfig:
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    api: APIConfig = field(default_factory=APIConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise InvalidConfigurationError("CONFIG_INVALID", f"Cannot load configuration {path}: {exc}") from exc


def _tuple_of_strings(value: object | None, default: Iterable[str]) -> tuple[str, ...]:
    if not value:
        return tuple(default)
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(value, Iterable):
        return tuple(str(item) for item in value)
    raise InvalidConfigurationError("CONFIG_INVALID", f"Unsupported languages configuration: {value!r}")


def _build_defaults(data: Mapping[str, object] | None) -> DefaultsConfig:
    if not data:
        return DefaultsConfig()
    return DefaultsConfig(
        theme=str(data.get("theme", DEFAULT_THEME)),
        search=bool(data.get("search", True)),
        languages=_tuple_of_strings(data.get("languages"), ()),
        summary=bool(data.get("summary", False)),
        raw=bool(data.get("raw", False)),
        omit_body=bool(data.get("omit_body", False)),
    )


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    log_file = str(data.get("log_file", "") or "")
    try:
        max_size = int(data.get("max_file_size_mb", 25))
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError("CONFIG_INVALID", f"Invalid max_file_size_mb: {exc}") from exc
    return RuntimeConfig(log_file=Path(log_file) if log_file else None, max_file_size_mb=max_size)


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    try:
        port = int(data.get("port", 8000))
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError("CONFIG_INVALID", f"Invalid api port: {exc}") from exc
    return APIConfig(
        host=str(data.get("host", "127.0.0.1")),
        port=port,
        enable_local_api=bool(data.get("enable_local_api", False)),
    )


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    value = raw.get(name)
    return value if isinstance(value, Mapping) else None


def load_config(path: Path | None = None) -> AppConfig:
    path = path or DEFAULT_CONFIG_PATH
    raw = _read_toml(path)
    return AppConfig(
        defaults=_build_defaults(_section(raw, "defaults")),
        runtime=_build_runtime(_section(raw, "runtime")),
        api=_build_api(_section(raw, "api")),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "defaults": {
            "theme": config.defaults.theme,
            "search": config.defaults.search,
            "languages": list(config.defaults.languages),
            "summary": config.defaults.summary,
            "raw": config.defaults.raw,
            "omit_body": config.defaults.omit_body,
        },
        "runtime": {
            "log_file": str(config.runtime.log_file) if config.runtime.log_file else "",
            "max_file_size_mb": config.runtime.max_file_size_mb,
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
            "enable_local_api": config.api.enable_local_api,
        },
    }
    return json.dumps(payload, indent=2)


__all__ = ["AppConfig", "APIConfig", "DefaultsConfig", "RuntimeConfig", "load_config", "dump_config"]
