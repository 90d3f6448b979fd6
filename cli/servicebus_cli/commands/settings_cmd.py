from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_base_uri, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/servicebus/config.toml).")

_KEYS = ("base_uri", "sas_key_name", "timeout")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        base_uri: str = typer.Option(
            ...,
            "--base-uri",
            prompt="Namespace base URI",
            help="Namespace URI like https://my-ns.servicebus.windows.net/",
        ),
        key_name: str = typer.Option(..., "--key-name", prompt="SAS key name", help="Shared access key name."),
        key_value: str = typer.Option(
            ...,
            "--key-value",
            prompt="SAS key value",
            hide_input=True,
            help="Shared access key.",
        ),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.base_uri = normalize_base_uri(base_uri, warn=True)
    cfg.sas_key_name = key_name.strip()
    cfg.sas_key_value = key_value
    if not cfg.base_uri:
        console.err("Base URI cannot be empty.")
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    key_state = "(set)" if cfg.sas_key_value else "(empty)"
    profiles = ",".join(sorted(cfg.profiles)) or "-"
    console.console.print(
        f"base_uri={cfg.base_uri or '-'} sas_key_name={cfg.sas_key_name or '-'} "
        f"sas_key_value={key_state} timeout={cfg.timeout} profiles={profiles}"
    )


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (base_uri, sas_key_name, timeout)."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k not in _KEYS:
        console.err(f"Unknown setting: {key}")
        raise typer.Exit(code=2)
    console.raw(str(getattr(cfg, k)))


@app.command("set")
def set_setting(
        base_uri: str | None = typer.Option(None, "--base-uri", help="Set namespace base URI."),
        key_name: str | None = typer.Option(None, "--key-name", help="Set SAS key name."),
        key_value: str | None = typer.Option(None, "--key-value", help="Set SAS key value."),
        timeout: int | None = typer.Option(None, "--timeout", min=0, help="Receive timeout in seconds."),
):
    cfg = load_config()
    if base_uri is not None:
        cfg.base_uri = normalize_base_uri(base_uri, warn=True)
    if key_name is not None:
        cfg.sas_key_name = key_name.strip()
    if key_value is not None:
        cfg.sas_key_value = key_value
    if timeout is not None:
        cfg.timeout = timeout
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
