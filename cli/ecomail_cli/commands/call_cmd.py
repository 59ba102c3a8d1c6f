from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
from ecomail_client import CatalogError, EcomailClientError, RemoteError
from ecomail_client.catalog import ENDPOINTS, endpoint_groups, get_endpoint
from rich.table import Table

from .. import console
from ..config import load_config
from ..formatting import parse_pairs
from ..http import make_client

logger = logging.getLogger(__name__)


def list_operations(
        group: str | None = typer.Option(None, "--group", help="Only show one group (lists, campaigns, ...)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """List the API operations available to 'ecomail call'."""
    if group and group not in endpoint_groups():
        console.err(f"Unknown group: {group}. Known groups: {', '.join(endpoint_groups())}")
        raise typer.Exit(code=2)
    endpoints = [ep for ep in ENDPOINTS.values() if not group or ep.group == group]

    if json_out:
        console.print_json(
            [
                {
                    "name": ep.name,
                    "group": ep.group,
                    "method": ep.method,
                    "path": ep.path,
                    "body": ep.body.value,
                    "query": ep.accepts_query,
                }
                for ep in endpoints
            ]
        )
        return

    table = Table(title="Operations")
    table.add_column("operation", style="bold")
    table.add_column("method")
    table.add_column("path")
    table.add_column("body")
    table.add_column("query")
    table.add_column("summary")
    for ep in endpoints:
        table.add_row(ep.name, ep.method, ep.path, ep.body.value, "yes" if ep.accepts_query else "-", ep.summary)
    console.console.print(table)


def _load_body(data: str | None, data_file: Path | None) -> Any | None:
    if data is not None and data_file is not None:
        raise ValueError("Use either --data or --data-file, not both.")
    if data_file is not None:
        data = data_file.read_text(encoding="utf-8")
    if data is None:
        return None
    try:
        return json.loads(data)
    except ValueError as e:
        raise ValueError(f"Request body is not valid JSON: {e}") from e


def call_operation(
        operation: str = typer.Argument(..., help="Operation name, see 'ecomail operations'."),
        param: list[str] | None = typer.Option(None, "-p", "--param", help="Path parameter as name=value."),
        query: list[str] | None = typer.Option(None, "-q", "--query", help="Extra query parameter as name=value."),
        data: str | None = typer.Option(None, "--data", help="JSON request body."),
        data_file: Path | None = typer.Option(None, "--data-file", help="Read the JSON request body from a file."),
        page: int | None = typer.Option(None, "--page", help="Page number for list endpoints."),
        response_format: str | None = typer.Option(None, "--format", help="jsona, jsono or plaintext."),
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    """Call any API operation by name."""
    try:
        ep = get_endpoint(operation)
        path_params = parse_pairs(param, option="--param")
        extra_query = parse_pairs(query, option="--query")
        body = _load_body(data, data_file)
    except (CatalogError, ValueError, OSError) as e:
        console.err(str(e))
        raise typer.Exit(code=2)

    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format=response_format)
    paged = client.page(page) if page is not None else client

    logger.debug("dispatching %s %s %s", ep.name, ep.method, ep.path)
    try:
        result = paged.call(ep.name, body=body, query=extra_query or None, **path_params)
        result.unwrap()
    except RemoteError as e:
        console.remote_error(e)
        raise typer.Exit(code=2)
    except EcomailClientError as e:
        console.err(f"{ep.name} failed: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    console.emit_result(result)
