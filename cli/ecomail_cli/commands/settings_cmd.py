from __future__ import annotations

import os

import typer
from ecomail_client import DEFAULT_BASE_URL

from .. import console
from ..config import config_path, default_config, load_config, normalize_base_url, normalize_response_format, save_config
from ..formatting import parse_pairs

app = typer.Typer(help="Manage local CLI settings (~/.config/ecomail/config.toml).")


def _mask(secret: str) -> str:
    secret = (secret or "").strip()
    if not secret:
        return "(empty)"
    if len(secret) <= 8:
        return "(set)"
    return f"{secret[:4]}…{secret[-4:]}"


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        api_key: str = typer.Option(..., "--api-key", prompt="API key", hide_input=True, help="Ecomail API key."),
        base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="API base URL."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.api_key = api_key.strip()
    if not cfg.api_key:
        console.err("API key cannot be empty.")
        raise typer.Exit(code=2)
    cfg.base_url = normalize_base_url(base_url, warn=True) or DEFAULT_BASE_URL
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    query = " ".join(f"{k}={v}" for k, v in cfg.query.items()) or "-"
    console.console.print(
        f"base_url={cfg.base_url} api_key={_mask(cfg.api_key)} response_format={cfg.response_format} "
        f"timeout_s={cfg.timeout_s} query={query}",
        markup=False,
    )
    for name, prof in cfg.profiles.items():
        console.console.print(
            f"profile {name}: base_url={prof.base_url or '-'} api_key={_mask(prof.api_key)} "
            f"response_format={prof.response_format or '-'}",
            markup=False,
        )


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (base_url, response_format, timeout_s)."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k == "base_url":
        console.console.print(cfg.base_url, markup=False)
        return
    if k == "response_format":
        console.console.print(cfg.response_format)
        return
    if k == "timeout_s":
        console.console.print(str(cfg.timeout_s))
        return
    console.err(f"Unknown setting: {key}")
    raise typer.Exit(code=2)


@app.command("set")
def set_setting(
        api_key: str | None = typer.Option(None, "--api-key", help="Set API key."),
        base_url: str | None = typer.Option(None, "--base-url", help="Set API base URL."),
        response_format: str | None = typer.Option(None, "--format", help="Set response format (jsona, jsono, plaintext)."),
        timeout_s: float | None = typer.Option(None, "--timeout", help="Set request timeout in seconds."),
        query: list[str] | None = typer.Option(None, "--query", help="Persistent query parameter as name=value."),
        unset_query: list[str] | None = typer.Option(None, "--unset-query", help="Remove a persistent query parameter."),
):
    cfg = load_config()
    try:
        if api_key is not None:
            cfg.api_key = api_key.strip()
        if base_url is not None:
            cfg.base_url = normalize_base_url(base_url, warn=True) or DEFAULT_BASE_URL
        if response_format is not None:
            cfg.response_format = normalize_response_format(response_format)
        if timeout_s is not None:
            if timeout_s <= 0:
                raise ValueError("Timeout must be positive.")
            cfg.timeout_s = timeout_s
        cfg.query.update(parse_pairs(query, option="--query"))
    except ValueError as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    for key in unset_query or []:
        cfg.query.pop(key, None)
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
