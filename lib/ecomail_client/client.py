from __future__ import annotations

from typing import Any, Mapping

import httpx

from .catalog import get_endpoint
from .config_types import DEFAULT_BASE_URL, ClientConfig, ResponseFormat
from .pipeline import build_url, classify, encode_body, merge_query
from .results import ApiResult
from .transport import Transport


class EcomailClient:
    """Ecomail API client.

    Every endpoint method returns an ``ApiResult``: ``SuccessArray``,
    ``SuccessObject`` or ``SuccessText`` depending on ``response_format``, or
    ``ErrorResult`` for non-2xx answers. Network failures raise
    ``TransportError``; bodies that cannot be encoded raise
    ``SerializationError`` before anything is sent.

    ``with_query``/``page``/``with_format`` return new clients over the same
    connection pool; the original client is never modified. Only the client
    that created the pool closes it; ``close()`` on a derived client is a no-op.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            transport: httpx.BaseTransport | None = None,
            _shared: Transport | None = None,
    ):
        self._cfg = cfg
        self._owns_transport = _shared is None
        self._t = _shared or Transport(cfg, transport=transport)

    @classmethod
    def create(
            cls,
            api_key: str,
            response_format: ResponseFormat | str = ResponseFormat.ARRAY,
            base_url: str = DEFAULT_BASE_URL,
            default_query: Mapping[str, Any] | None = None,
            *,
            timeout_s: float = 15.0,
            transport: httpx.BaseTransport | None = None,
    ) -> EcomailClient:
        cfg = ClientConfig(
            api_key=api_key,
            base_url=base_url,
            response_format=ResponseFormat.parse(response_format),
            default_query=dict(default_query or {}),
            timeout_s=timeout_s,
        )
        return cls(cfg, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def close(self) -> None:
        if self._owns_transport:
            self._t.close()

    def __enter__(self) -> EcomailClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- derivation ---
    def _derive(self, cfg: ClientConfig) -> EcomailClient:
        return type(self)(cfg, _shared=self._t)

    def with_query(self, key: str, value: Any) -> EcomailClient:
        return self._derive(self._cfg.with_query(key, value))

    def page(self, page: int) -> EcomailClient:
        return self._derive(self._cfg.page(page))

    def with_format(self, response_format: ResponseFormat | str) -> EcomailClient:
        return self._derive(self._cfg.with_format(response_format))

    # --- pipeline ---
    def send(
            self,
            path: str,
            method: str = "GET",
            body: Any | None = None,
            query: Mapping[str, Any] | None = None,
    ) -> ApiResult:
        content = encode_body(body) if body is not None else None
        url = build_url(self._cfg.base_url, path, merge_query(self._cfg.default_query, query))
        r = self._t.request(method.upper(), url, content=content)
        return classify(r.status_code, r.headers.get("content-type"), r.text, self._cfg.response_format)

    def call(
            self,
            operation: str,
            *,
            body: Any | None = None,
            query: Mapping[str, Any] | None = None,
            **params: Any,
    ) -> ApiResult:
        """Dispatch a catalog operation by name (see ``catalog.ENDPOINTS``)."""
        ep = get_endpoint(operation)
        path = ep.render_path(params)
        ep.check_query(query)
        return self.send(path, ep.method, ep.resolve_body(body), query)

    # --- lists ---
    def list_lists(self) -> ApiResult:
        return self.call("list_lists")

    def add_list(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("add_list", body=data)

    def show_list(self, list_id: str | int) -> ApiResult:
        return self.call("show_list", list_id=list_id)

    def update_list(self, list_id: str | int, data: Mapping[str, Any]) -> ApiResult:
        return self.call("update_list", list_id=list_id, body=data)

    def get_subscribers(self, list_id: str | int, query: Mapping[str, Any] | None = None) -> ApiResult:
        return self.call("get_subscribers", list_id=list_id, query=query)

    def get_subscriber(self, list_id: str | int, email: str) -> ApiResult:
        return self.call("get_subscriber", list_id=list_id, email=email)

    def get_subscriber_by_phone(self, list_id: str | int, phone: str) -> ApiResult:
        return self.call("get_subscriber_by_phone", list_id=list_id, phone=phone)

    def get_list_segments(self, list_id: str | int) -> ApiResult:
        return self.call("get_list_segments", list_id=list_id)

    def add_subscriber(self, list_id: str | int, data: Mapping[str, Any]) -> ApiResult:
        return self.call("add_subscriber", list_id=list_id, body=data)

    def remove_subscriber(self, list_id: str | int, data: Mapping[str, Any]) -> ApiResult:
        return self.call("remove_subscriber", list_id=list_id, body=data)

    def update_subscriber(self, list_id: str | int, data: Mapping[str, Any]) -> ApiResult:
        return self.call("update_subscriber", list_id=list_id, body=data)

    def add_subscriber_bulk(self, list_id: str | int, data: Mapping[str, Any]) -> ApiResult:
        return self.call("add_subscriber_bulk", list_id=list_id, body=data)

    # --- subscribers ---
    def get_subscriber_lists(self, email: str) -> ApiResult:
        return self.call("get_subscriber_lists", email=email)

    def get_subscriber_by_email(self, email: str) -> ApiResult:
        return self.call("get_subscriber_by_email", email=email)

    def delete_subscriber(self, email: str) -> ApiResult:
        """Remove the subscriber from all lists."""
        return self.call("delete_subscriber", email=email)

    # --- campaigns ---
    def list_campaigns(self, filters: str | None = None) -> ApiResult:
        return self.call("list_campaigns", query={"filters": filters} if filters is not None else None)

    def add_campaign(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("add_campaign", body=data)

    def update_campaign(self, campaign_id: str | int, data: Mapping[str, Any]) -> ApiResult:
        return self.call("update_campaign", campaign_id=campaign_id, body=data)

    def send_campaign(self, campaign_id: str | int) -> ApiResult:
        """Queue the campaign for sending immediately. Cannot be undone."""
        return self.call("send_campaign", campaign_id=campaign_id)

    def get_campaign_stats(self, campaign_id: str | int) -> ApiResult:
        return self.call("get_campaign_stats", campaign_id=campaign_id)

    def get_campaign_stats_detail(self, campaign_id: str | int, query: Mapping[str, Any] | None = None) -> ApiResult:
        return self.call("get_campaign_stats_detail", campaign_id=campaign_id, query=query)

    def get_segment_stats(self, segment_id: str) -> ApiResult:
        return self.call("get_segment_stats", segment_id=segment_id)

    # --- automation ---
    def list_automations(self) -> ApiResult:
        return self.call("list_automations")

    def trigger_automation(self, automation_id: str | int, data: Mapping[str, Any]) -> ApiResult:
        return self.call("trigger_automation", automation_id=automation_id, body=data)

    def get_pipeline_stats(self, pipeline_id: str | int) -> ApiResult:
        return self.call("get_pipeline_stats", pipeline_id=pipeline_id)

    def get_pipeline_stats_detail(self, pipeline_id: str | int, query: Mapping[str, Any] | None = None) -> ApiResult:
        return self.call("get_pipeline_stats_detail", pipeline_id=pipeline_id, query=query)

    def get_pipeline_stats_for_emails(
            self,
            pipeline_id: str | int,
            data: Mapping[str, Any],
            query: Mapping[str, Any] | None = None,
    ) -> ApiResult:
        return self.call("get_pipeline_stats_for_emails", pipeline_id=pipeline_id, body=data, query=query)

    # --- templates ---
    def create_template(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("create_template", body=data)

    def get_template(self, template_id: str | int) -> ApiResult:
        return self.call("get_template", template_id=template_id)

    # --- domains ---
    def list_domains(self) -> ApiResult:
        return self.call("list_domains")

    def create_domain(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("create_domain", body=data)

    def delete_domain(self, domain_id: str | int) -> ApiResult:
        return self.call("delete_domain", domain_id=domain_id)

    # --- transactional e-mails ---
    def send_transactional_email(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("send_transactional_email", body=data)

    def send_transactional_template(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("send_transactional_template", body=data)

    def get_transactional_stats(self) -> ApiResult:
        return self.call("get_transactional_stats")

    def get_transactional_stats_doi(self) -> ApiResult:
        return self.call("get_transactional_stats_doi")

    # --- transactions ---
    def create_transaction(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("create_transaction", body=data)

    def create_bulk_transactions(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("create_bulk_transactions", body=data)

    def update_transaction(self, transaction_id: str | int, data: Mapping[str, Any]) -> ApiResult:
        return self.call("update_transaction", transaction_id=transaction_id, body=data)

    def delete_transaction(self, transaction_id: str | int) -> ApiResult:
        return self.call("delete_transaction", transaction_id=transaction_id)

    def delete_bulk_transactions(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("delete_bulk_transactions", body=data)

    def get_transactions(self, query: Mapping[str, Any] | None = None) -> ApiResult:
        return self.call("get_transactions", query=query)

    # --- feeds ---
    def refresh_product_feed(self, feed_id: str | int) -> ApiResult:
        return self.call("refresh_product_feed", feed_id=feed_id)

    def refresh_data_feed(self, feed_id: str | int) -> ApiResult:
        return self.call("refresh_data_feed", feed_id=feed_id)

    # --- tracker ---
    def add_event(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("add_event", body=data)

    # --- search ---
    def search(self, query: str) -> ApiResult:
        return self.call("search", body={"query": query})

    # --- coupons ---
    def import_coupons(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("import_coupons", body=data)

    def delete_coupons(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("delete_coupons", body=data)

    # --- webhook ---
    def set_webhook(self, data: Mapping[str, Any]) -> ApiResult:
        return self.call("set_webhook", body=data)

    def get_webhook(self) -> ApiResult:
        return self.call("get_webhook")

    def delete_webhook(self) -> ApiResult:
        return self.call("delete_webhook")
