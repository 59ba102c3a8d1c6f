from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import quote

from .errors import CatalogError

_PLACEHOLDER_RE = re.compile(r"\{([a-z_]+)\}")

# Kept literal so e-mail addresses and +420... phone numbers look as the API expects.
_PATH_SAFE = "@+"


class BodyRule(str, Enum):
    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class Endpoint:
    name: str
    method: str
    path: str
    group: str
    summary: str
    body: BodyRule = BodyRule.NONE
    accepts_query: bool = False

    @property
    def path_params(self) -> tuple[str, ...]:
        return tuple(_PLACEHOLDER_RE.findall(self.path))

    def render_path(self, params: Mapping[str, Any]) -> str:
        expected = set(self.path_params)
        missing = sorted(expected - set(params))
        if missing:
            raise CatalogError(f"{self.name}: missing path parameter(s): {', '.join(missing)}")
        unexpected = sorted(set(params) - expected)
        if unexpected:
            raise CatalogError(f"{self.name}: unexpected parameter(s): {', '.join(unexpected)}")
        return _PLACEHOLDER_RE.sub(lambda m: encode_segment(params[m.group(1)]), self.path)

    def resolve_body(self, body: Any | None) -> Any | None:
        if self.body is BodyRule.NONE:
            if body is not None:
                raise CatalogError(f"{self.name}: {self.method} {self.path} does not take a body")
            return None
        if body is None:
            if self.body is BodyRule.REQUIRED:
                raise CatalogError(f"{self.name}: request body is required")
            return {}
        return body

    def check_query(self, query: Mapping[str, Any] | None) -> None:
        if query and not self.accepts_query:
            raise CatalogError(f"{self.name}: extra query parameters are not accepted")


def encode_segment(value: Any) -> str:
    text = str(value)
    if not text:
        raise CatalogError("path parameter cannot be empty")
    return quote(text, safe=_PATH_SAFE)


def _ep(name: str, method: str, path: str, group: str, summary: str, **kwargs: Any) -> Endpoint:
    return Endpoint(name=name, method=method, path=path, group=group, summary=summary, **kwargs)


_REQUIRED = BodyRule.REQUIRED
_OPTIONAL = BodyRule.OPTIONAL

_ENDPOINTS = [
    # lists
    _ep("list_lists", "GET", "lists", "lists", "All contact lists."),
    _ep("add_list", "POST", "lists", "lists", "Create a contact list.", body=_REQUIRED),
    _ep("show_list", "GET", "lists/{list_id}", "lists", "Contact list detail."),
    _ep("update_list", "PUT", "lists/{list_id}", "lists", "Update a contact list.", body=_OPTIONAL),
    _ep("get_subscribers", "GET", "lists/{list_id}/subscribers", "lists", "Subscribers of a list.",
        accepts_query=True),
    _ep("get_subscriber", "GET", "lists/{list_id}/subscriber/{email}", "lists", "Subscriber of a list by e-mail."),
    _ep("get_subscriber_by_phone", "GET", "lists/{list_id}/subscriber-by-phone/{phone}", "lists",
        "Subscriber of a list by phone number."),
    _ep("get_list_segments", "GET", "lists/{list_id}/segments", "lists", "Segments of a list."),
    _ep("add_subscriber", "POST", "lists/{list_id}/subscribe", "lists", "Subscribe a contact.", body=_REQUIRED),
    _ep("remove_subscriber", "DELETE", "lists/{list_id}/unsubscribe", "lists", "Unsubscribe a contact.",
        body=_OPTIONAL),
    _ep("update_subscriber", "PUT", "lists/{list_id}/update-subscriber", "lists", "Update a subscriber.",
        body=_OPTIONAL),
    _ep("add_subscriber_bulk", "POST", "lists/{list_id}/subscribe-bulk", "lists", "Subscribe contacts in bulk.",
        body=_REQUIRED),
    # subscribers
    _ep("get_subscriber_lists", "GET", "subscribers/{email}", "subscribers", "Lists a contact belongs to."),
    _ep("get_subscriber_by_email", "GET", "subscribers/{email}", "subscribers", "Global subscriber detail."),
    _ep("delete_subscriber", "DELETE", "subscribers/{email}/delete", "subscribers",
        "Remove a subscriber from all lists.", body=_OPTIONAL),
    # campaigns
    _ep("list_campaigns", "GET", "campaigns", "campaigns", "All campaigns.", accepts_query=True),
    _ep("add_campaign", "POST", "campaigns", "campaigns", "Create a campaign.", body=_REQUIRED),
    _ep("update_campaign", "PUT", "campaigns/{campaign_id}", "campaigns", "Update a campaign.", body=_OPTIONAL),
    _ep("send_campaign", "GET", "campaign/{campaign_id}/send", "campaigns", "Queue a campaign for sending."),
    _ep("get_campaign_stats", "GET", "campaigns/{campaign_id}/stats", "campaigns", "Campaign statistics."),
    _ep("get_campaign_stats_detail", "GET", "campaigns/{campaign_id}/stats-detail", "campaigns",
        "Per-subscriber campaign statistics.", accepts_query=True),
    _ep("get_segment_stats", "GET", "campaigns/segment/{segment_id}/stats", "campaigns",
        "Segment statistics across campaigns."),
    # automation
    _ep("list_automations", "GET", "pipelines", "automation", "All automation pipelines."),
    _ep("trigger_automation", "POST", "pipelines/{automation_id}/trigger", "automation",
        "Trigger an automation for a contact.", body=_REQUIRED),
    _ep("get_pipeline_stats", "GET", "pipelines/{pipeline_id}/stats", "automation", "Automation statistics."),
    _ep("get_pipeline_stats_detail", "GET", "pipelines/{pipeline_id}/stats-detail", "automation",
        "Per-subscriber automation statistics.", accepts_query=True),
    _ep("get_pipeline_stats_for_emails", "POST", "pipelines/{pipeline_id}/stats-detail", "automation",
        "Automation statistics for a set of e-mails.", body=_REQUIRED, accepts_query=True),
    # templates
    _ep("create_template", "POST", "template", "templates", "Create a template.", body=_REQUIRED),
    _ep("get_template", "GET", "template/{template_id}", "templates", "Template detail."),
    # domains
    _ep("list_domains", "GET", "domains", "domains", "Sending domains."),
    _ep("create_domain", "POST", "domains", "domains", "Add a sending domain.", body=_REQUIRED),
    _ep("delete_domain", "DELETE", "domains/{domain_id}", "domains", "Remove a sending domain.", body=_OPTIONAL),
    # transactional
    _ep("send_transactional_email", "POST", "transactional/send-message", "transactional",
        "Send a transactional message.", body=_REQUIRED),
    _ep("send_transactional_template", "POST", "transactional/send-template", "transactional",
        "Send a transactional template.", body=_REQUIRED),
    _ep("get_transactional_stats", "GET", "transactional/stats", "transactional", "Transactional statistics."),
    _ep("get_transactional_stats_doi", "GET", "transactional/stats/doi", "transactional",
        "Double opt-in statistics."),
    # transactions
    _ep("create_transaction", "POST", "tracker/transaction", "transactions", "Record a transaction.",
        body=_REQUIRED),
    _ep("create_bulk_transactions", "POST", "tracker/transaction-bulk", "transactions",
        "Record transactions in bulk.", body=_REQUIRED),
    _ep("update_transaction", "PUT", "tracker/transaction/{transaction_id}", "transactions",
        "Update a transaction.", body=_OPTIONAL),
    _ep("delete_transaction", "DELETE", "tracker/transaction/{transaction_id}/delete", "transactions",
        "Delete a transaction.", body=_OPTIONAL),
    _ep("delete_bulk_transactions", "DELETE", "tracker/transaction/delete-bulk", "transactions",
        "Delete transactions in bulk.", body=_OPTIONAL),
    _ep("get_transactions", "GET", "tracker/transaction", "transactions", "List transactions.",
        accepts_query=True),
    # feeds
    _ep("refresh_product_feed", "GET", "feeds/{feed_id}/refresh", "feeds", "Refresh a product feed."),
    _ep("refresh_data_feed", "GET", "data-feeds/{feed_id}/refresh", "feeds", "Refresh a data feed."),
    # tracker
    _ep("add_event", "POST", "tracker/events", "tracker", "Record a tracking event.", body=_REQUIRED),
    # search
    _ep("search", "POST", "search", "search", "Search contacts.", body=_REQUIRED),
    # coupons
    _ep("import_coupons", "POST", "coupons/import", "coupons", "Import discount coupons.", body=_REQUIRED),
    _ep("delete_coupons", "DELETE", "coupons/delete", "coupons", "Delete discount coupons.", body=_OPTIONAL),
    # webhook
    _ep("set_webhook", "POST", "account/settings/webhook", "webhook", "Set the account webhook.",
        body=_REQUIRED),
    _ep("get_webhook", "GET", "account/settings/webhook", "webhook", "Current account webhook."),
    _ep("delete_webhook", "DELETE", "account/settings/webhook", "webhook", "Remove the account webhook.",
        body=_OPTIONAL),
]

ENDPOINTS: Mapping[str, Endpoint] = MappingProxyType({ep.name: ep for ep in _ENDPOINTS})


def get_endpoint(name: str) -> Endpoint:
    key = (name or "").strip().lower().replace("-", "_")
    try:
        return ENDPOINTS[key]
    except KeyError:
        raise CatalogError(f"Unknown operation: {name}") from None


def endpoint_groups() -> list[str]:
    groups: list[str] = []
    for ep in ENDPOINTS.values():
        if ep.group not in groups:
            groups.append(ep.group)
    return groups
