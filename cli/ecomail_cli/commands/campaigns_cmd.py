from __future__ import annotations

import typer
from ecomail_client import EcomailClientError
from rich.table import Table

from .. import console
from ..config import load_config
from ..formatting import cell, extract_items
from ..http import make_client

app = typer.Typer(help="Campaigns.")


@app.command("list")
def list_campaigns(
        filters: str | None = typer.Option(None, "--filters", help="Filter expression passed to the API."),
        page: int | None = typer.Option(None, "--page", help="Page number."),
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format="jsona")
    paged = client.page(page) if page is not None else client

    try:
        data = paged.list_campaigns(filters).unwrap()
    except EcomailClientError as e:
        console.err(f"Failed to list campaigns: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Campaigns")
    table.add_column("id", style="bold")
    table.add_column("title")
    table.add_column("subject")
    table.add_column("status")
    table.add_column("sent_at")

    for row in extract_items(data):
        table.add_row(
            cell(row, "id"),
            cell(row, "title", "name"),
            cell(row, "subject"),
            cell(row, "status"),
            cell(row, "sent_at", "send_at"),
        )

    console.console.print(table)


@app.command("send")
def send_campaign(
        campaign_id: str = typer.Argument(..., help="Campaign ID."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    if not yes:
        if not typer.confirm(f"Queue campaign {campaign_id} for sending now? This cannot be undone.", default=False):
            console.info("Aborted.")
            raise typer.Exit(code=1)

    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format="jsona")

    try:
        client.send_campaign(campaign_id).unwrap()
    except EcomailClientError as e:
        console.err(f"Failed to send campaign {campaign_id}: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    console.ok(f"Campaign {campaign_id} queued for sending.")


@app.command("stats")
def campaign_stats(
        campaign_id: str = typer.Argument(..., help="Campaign ID."),
        detail: bool = typer.Option(False, "--detail", help="Per-subscriber statistics."),
        page: int | None = typer.Option(None, "--page", help="Page number (with --detail)."),
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format="jsona")

    try:
        if detail:
            result = client.get_campaign_stats_detail(campaign_id, {"page": page})
        else:
            result = client.get_campaign_stats(campaign_id)
        data = result.unwrap()
    except EcomailClientError as e:
        console.err(f"Failed to fetch campaign stats: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    console.print_json(data)
