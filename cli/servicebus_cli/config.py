from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from . import console

APP_NAME = "servicebus"
CONFIG_FILENAME = "config.toml"
DEFAULT_TIMEOUT = 4
ENV_BASE_URI = "SERVICEBUS_BASE_URI"
ENV_SAS_KEY_NAME = "SERVICEBUS_SAS_KEY_NAME"
ENV_SAS_KEY_VALUE = "SERVICEBUS_SAS_KEY_VALUE"

_WARNED_BASE_URI_SCHEME = False


@dataclass
class AppConfig:
    base_uri: str = ""
    sas_key_name: str = ""
    sas_key_value: str = ""
    timeout: int = DEFAULT_TIMEOUT
    profiles: dict[str, dict[str, Any]] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def normalize_base_uri(raw: str | None, *, warn: bool = False) -> str:
    """Ensure a scheme and exactly one trailing slash."""
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if not (lowered.startswith("http://") or lowered.startswith("https://")):
        host = value.split("/", 1)[0].split(":", 1)[0].lower()
        scheme = "http://" if host in {"localhost", "127.0.0.1", "0.0.0.0"} else "https://"
        value = f"{scheme}{value}"
        if warn:
            _warn_missing_scheme(value)
    return value + "/"


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_BASE_URI_SCHEME
    if _WARNED_BASE_URI_SCHEME:
        return
    if not (sys.stderr.isatty() or sys.stdout.isatty()):
        return
    console.warn(f"base_uri missing scheme, assuming {normalized}")
    _WARNED_BASE_URI_SCHEME = True


def _parse_timeout(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    data: dict[str, Any] = {
        "base_uri": cfg.base_uri,
        "sas_key_name": cfg.sas_key_name,
        "sas_key_value": cfg.sas_key_value,
        "timeout": cfg.timeout,
    }
    if cfg.profiles:
        data["profiles"] = {
            name: {k: v for k, v in prof.items() if v is not None}
            for name, prof in cfg.profiles.items()
        }
    return data


def from_toml(data: dict[str, Any]) -> AppConfig:
    profiles: dict[str, dict[str, Any]] = {}
    profiles_raw = data.get("profiles") or {}
    if isinstance(profiles_raw, dict):
        for name, prof in profiles_raw.items():
            if isinstance(prof, dict):
                profiles[str(name)] = dict(prof)

    return AppConfig(
        base_uri=normalize_base_uri(str(data.get("base_uri") or ""), warn=True),
        sas_key_name=str(data.get("sas_key_name") or "").strip(),
        sas_key_value=str(data.get("sas_key_value") or ""),
        timeout=_parse_timeout(data.get("timeout"), DEFAULT_TIMEOUT),
        profiles=profiles,
    )


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return default_config()
    return from_toml(data)


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    prof = cfg.profiles.get(profile)
    if not isinstance(prof, dict):
        return cfg
    return AppConfig(
        base_uri=normalize_base_uri(str(prof.get("base_uri") or ""), warn=True) or cfg.base_uri,
        sas_key_name=str(prof.get("sas_key_name") or cfg.sas_key_name),
        sas_key_value=str(prof.get("sas_key_value") or cfg.sas_key_value),
        timeout=_parse_timeout(prof.get("timeout"), cfg.timeout),
        profiles=cfg.profiles,
    )


def apply_env(cfg: AppConfig) -> AppConfig:
    base_uri = os.getenv(ENV_BASE_URI, "").strip()
    key_name = os.getenv(ENV_SAS_KEY_NAME, "").strip()
    key_value = os.getenv(ENV_SAS_KEY_VALUE, "")
    return AppConfig(
        base_uri=normalize_base_uri(base_uri) if base_uri else cfg.base_uri,
        sas_key_name=key_name or cfg.sas_key_name,
        sas_key_value=key_value or cfg.sas_key_value,
        timeout=cfg.timeout,
        profiles=cfg.profiles,
    )


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
