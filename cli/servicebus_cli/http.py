from __future__ import annotations

from servicebus_client import ServiceBusClient
from servicebus_client.config_types import ClientConfig

from .config import AppConfig, apply_env, apply_profile, normalize_base_uri


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None,
    base_uri_override: str | None,
) -> ServiceBusClient:
    """Build a client from the config file, profile, environment and overrides.

    Raises ``ConfigurationError`` when base URI or SAS key are still missing.
    """
    effective_cfg = apply_env(apply_profile(cfg, profile))
    base_uri = normalize_base_uri(base_uri_override, warn=True) if base_uri_override else effective_cfg.base_uri
    return ServiceBusClient(
        ClientConfig(
            base_uri=base_uri,
            sas_key_name=effective_cfg.sas_key_name,
            sas_key_value=effective_cfg.sas_key_value,
            timeout=effective_cfg.timeout,
        )
    )
