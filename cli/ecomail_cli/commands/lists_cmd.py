from __future__ import annotations

import typer
from ecomail_client import EcomailClientError
from rich.table import Table

from .. import console
from ..config import load_config
from ..formatting import cell, extract_items
from ..http import make_client

app = typer.Typer(help="Contact lists and their subscribers.")


@app.command("list")
def list_lists(
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format="jsona")

    try:
        data = client.list_lists().unwrap()
    except EcomailClientError as e:
        console.err(f"Failed to list contact lists: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Contact lists")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("from_email")
    table.add_column("subscribers")

    for row in extract_items(data):
        table.add_row(
            cell(row, "id"),
            cell(row, "name"),
            cell(row, "from_email"),
            cell(row, "active_subscribers", "subscribers"),
        )

    console.console.print(table)


@app.command("show")
def show_list(
        list_id: str = typer.Argument(..., help="List ID."),
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format="jsona")

    try:
        data = client.show_list(list_id).unwrap()
    except EcomailClientError as e:
        console.err(f"Failed to fetch list {list_id}: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    console.print_json(data)


@app.command("subscribers")
def list_subscribers(
        list_id: str = typer.Argument(..., help="List ID."),
        page: int | None = typer.Option(None, "--page", help="Page number."),
        status: int | None = typer.Option(None, "--status", help="Filter by subscriber status code."),
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format="jsona")
    paged = client.page(page) if page is not None else client

    try:
        data = paged.get_subscribers(list_id, {"status": status}).unwrap()
    except EcomailClientError as e:
        console.err(f"Failed to list subscribers: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    if isinstance(data, dict) and data.get("total") is not None:
        console.info(f"total={data.get('total')} page={data.get('current_page', page or 1)}")

    table = Table(title=f"Subscribers of list {list_id}")
    table.add_column("email", style="bold")
    table.add_column("name")
    table.add_column("status")
    table.add_column("subscribed_at")

    for row in extract_items(data):
        subscriber = row.get("subscriber") if isinstance(row, dict) and isinstance(row.get("subscriber"), dict) else row
        table.add_row(
            cell(subscriber, "email"),
            " ".join(part for part in (cell(subscriber, "name"), cell(subscriber, "surname")) if part != "-") or "-",
            cell(row, "status"),
            cell(row, "subscribed_at", "created_at"),
        )

    console.console.print(table)


@app.command("subscribe")
def subscribe(
        list_id: str = typer.Argument(..., help="List ID."),
        email: str = typer.Argument(..., help="Subscriber e-mail."),
        name: str | None = typer.Option(None, "--name", help="First name."),
        surname: str | None = typer.Option(None, "--surname", help="Last name."),
        update_existing: bool = typer.Option(False, "--update-existing", help="Update an existing subscriber."),
        resubscribe: bool = typer.Option(False, "--resubscribe", help="Resubscribe an unsubscribed contact."),
        autoresponders: bool = typer.Option(True, "--autoresponders/--no-autoresponders",
                                            help="Trigger autoresponders."),
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    subscriber: dict[str, str] = {"email": email}
    if name:
        subscriber["name"] = name
    if surname:
        subscriber["surname"] = surname
    body = {
        "subscriber_data": subscriber,
        "trigger_autoresponders": autoresponders,
        "update_existing": update_existing,
        "resubscribe": resubscribe,
    }

    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format="jsona")

    try:
        data = client.add_subscriber(list_id, body).unwrap()
    except EcomailClientError as e:
        console.err(f"Failed to subscribe {email}: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    console.ok(f"Subscribed {email} to list {list_id}.")
    if isinstance(data, dict) and data.get("id") is not None:
        console.info(f"subscriber id={data.get('id')}")


@app.command("unsubscribe")
def unsubscribe(
        list_id: str = typer.Argument(..., help="List ID."),
        email: str = typer.Argument(..., help="Subscriber e-mail."),
        profile: str | None = typer.Option(None, "--profile", help="Settings profile to use."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, profile=profile, base_url_override=base_url, response_format="jsona")

    try:
        client.remove_subscriber(list_id, {"email": email}).unwrap()
    except EcomailClientError as e:
        console.err(f"Failed to unsubscribe {email}: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    console.ok(f"Unsubscribed {email} from list {list_id}.")
