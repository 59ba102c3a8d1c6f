from __future__ import annotations

from importlib import metadata

import typer
from ecomail_client import ClientConfig, EcomailClient, ResponseFormat

from . import console
from .config import AppConfig, apply_profile, normalize_base_url, resolve_api_key, resolve_base_url


def cli_version() -> str:
    try:
        return metadata.version("ecomail")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None = None,
    base_url_override: str | None = None,
    response_format: str | None = None,
) -> EcomailClient:
    effective_cfg = apply_profile(cfg, profile)
    base_url = normalize_base_url(base_url_override or resolve_base_url(effective_cfg), warn=True)
    api_key = resolve_api_key(effective_cfg)
    if not api_key:
        console.err("API key is not configured. Run 'ecomail settings init' or set ECOMAIL_API_KEY.")
        raise typer.Exit(code=2)
    try:
        fmt = ResponseFormat.parse(response_format or effective_cfg.response_format)
    except ValueError as e:
        console.err(str(e))
        raise typer.Exit(code=2)

    return EcomailClient(
        ClientConfig(
            api_key=api_key,
            base_url=base_url,
            response_format=fmt,
            default_query=effective_cfg.query,
            timeout_s=effective_cfg.timeout_s,
            user_agent=f"ecomail-cli/{cli_version()}",
        )
    )
