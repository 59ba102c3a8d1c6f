from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from ecomail_client import DEFAULT_BASE_URL, ResponseFormat
from platformdirs import user_config_dir

from . import console

APP_NAME = "ecomail"
CONFIG_FILENAME = "config.toml"
ENV_API_KEY = "ECOMAIL_API_KEY"
ENV_BASE_URL = "ECOMAIL_BASE_URL"

_WARNED_BASE_URL_SCHEME = False


@dataclass
class ProfileConfig:
    api_key: str = ""
    base_url: str = ""
    response_format: str = ""


@dataclass
class AppConfig:
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    response_format: str = ResponseFormat.ARRAY.value
    timeout_s: float = 15.0
    query: dict[str, str | int] = field(default_factory=dict)
    profiles: dict[str, ProfileConfig] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_BASE_URL_SCHEME
    if _WARNED_BASE_URL_SCHEME:
        return
    if not _is_interactive():
        return
    console.warn(f"base_url missing scheme, assuming {normalized}")
    _WARNED_BASE_URL_SCHEME = True


def _is_interactive() -> bool:
    import sys
    return bool(sys.stderr.isatty() or sys.stdout.isatty())


def normalize_response_format(raw: str | None) -> str:
    if not raw:
        return ResponseFormat.ARRAY.value
    return ResponseFormat.parse(raw).value


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return _prune_none(
        {
            "api_key": cfg.api_key,
            "base_url": cfg.base_url,
            "response_format": cfg.response_format,
            "timeout_s": cfg.timeout_s,
            "query": dict(cfg.query),
            "profiles": {
                name: {
                    "api_key": p.api_key or None,
                    "base_url": p.base_url or None,
                    "response_format": p.response_format or None,
                }
                for name, p in cfg.profiles.items()
            },
        }
    )


def _prune_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _prune_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_prune_none(item) for item in value if item is not None]
    return value


def _query_from_toml(raw: Any) -> dict[str, str | int]:
    query: dict[str, str | int] = {}
    if not isinstance(raw, dict):
        return query
    for key, value in raw.items():
        if isinstance(value, bool):
            query[str(key)] = int(value)
        elif isinstance(value, (str, int)):
            query[str(key)] = value
    return query


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    cfg.api_key = str(data.get("api_key") or "").strip()
    cfg.base_url = normalize_base_url(str(data.get("base_url") or ""), warn=True) or DEFAULT_BASE_URL
    try:
        cfg.response_format = normalize_response_format(str(data.get("response_format") or ""))
    except ValueError:
        console.warn(f"Ignoring unknown response_format in config: {data.get('response_format')!r}")
    timeout_raw = data.get("timeout_s")
    if isinstance(timeout_raw, (int, float)) and not isinstance(timeout_raw, bool) and timeout_raw > 0:
        cfg.timeout_s = float(timeout_raw)
    cfg.query = _query_from_toml(data.get("query"))

    profiles_raw = data.get("profiles") or {}
    if isinstance(profiles_raw, dict):
        for name, v in profiles_raw.items():
            if not isinstance(v, dict):
                continue
            cfg.profiles[str(name)] = ProfileConfig(
                api_key=str(v.get("api_key") or "").strip(),
                base_url=normalize_base_url(str(v.get("base_url") or ""), warn=True),
                response_format=str(v.get("response_format") or "").strip(),
            )
    return cfg


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    prof = cfg.profiles.get(profile)
    if prof is None:
        console.warn(f"Profile '{profile}' not found in {config_path()}, using defaults.")
        return cfg
    return AppConfig(
        api_key=prof.api_key or cfg.api_key,
        base_url=prof.base_url or cfg.base_url,
        response_format=prof.response_format or cfg.response_format,
        timeout_s=cfg.timeout_s,
        query=dict(cfg.query),
        profiles=cfg.profiles,
    )


def resolve_api_key(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_API_KEY, "").strip()
    if env_value:
        return env_value
    return (cfg.api_key or "").strip()


def resolve_base_url(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_BASE_URL, "").strip()
    if env_value:
        return env_value.rstrip("/")
    return (cfg.base_url or DEFAULT_BASE_URL).strip().rstrip("/")


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
