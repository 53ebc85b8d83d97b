from __future__ import annotations

import logging
import random
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterator
from urllib.parse import parse_qs, urlparse

import requests
from azure.core.credentials import TokenCredential

from o365toolbox.azure.auth import scopes

from .models import (
    ContentBlob,
    ContentTypeLike,
    Subscription,
    Timestamp,
    Webhook,
    WebhookLike,
)

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = frozenset({429, 503, 504})
NEXT_PAGE_HEADER = "NextPageUri"
PUBLISHER_PARAM = "PublisherIdentifier"


def format_timestamp(value: Timestamp | None) -> str | None:
    """Render a time bound the way the API expects (UTC, second precision).

    Strings are passed through verbatim. Naive datetimes are taken as UTC.
    """
    if value is None or isinstance(value, str):
        return value
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S")


def _content_type_value(content_type: ContentTypeLike) -> str:
    return content_type.value if isinstance(content_type, Enum) else content_type


class ManagementActivityClient:
    """Requests-based client for the Office 365 Management Activity API."""

    def __init__(
        self,
        credential: TokenCredential,
        tenant_id: str,
        *,
        resource: str = scopes.MANAGEMENT_RESOURCE,
        publisher_identifier: str | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the management client.

        Args:
            credential: Credential used to obtain bearer tokens for ``resource``.
            tenant_id: The tenant whose activity feed is queried.
            resource: Base URL of the Management Activity API.
            publisher_identifier: Optional GUID sent as ``PublisherIdentifier``
                so throttling quota is attributed to the caller.
            session: HTTP session to reuse. A new one is created if omitted.
        """
        self.max_retries: int = 5
        self.base_delay: float = 1.0

        self._credential = credential
        self._tenant_id = tenant_id
        self._scope = scopes.scope_from_resource(resource)
        self._publisher_identifier = publisher_identifier
        self._session = session or requests.Session()
        self._base_url = (
            f"{resource.rstrip('/')}/api/v1.0/{tenant_id}/activity/feed"
        )

    @property
    def tenant_id(self) -> str:
        return self._tenant_id

    def _headers(self) -> dict[str, str]:
        token = self._credential.get_token(self._scope).token
        return {"Authorization": f"Bearer {token}", "Accept": "application/json"}

    def _build_params(self, url: str, **params: str | None) -> dict[str, str]:
        """Drop unset params and add the publisher identifier unless the URL has it."""
        built = {key: value for key, value in params.items() if value is not None}
        if self._publisher_identifier and PUBLISHER_PARAM not in parse_qs(
            urlparse(url).query
        ):
            built[PUBLISHER_PARAM] = self._publisher_identifier
        return built

    def _request_with_retry(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> requests.Response:
        for attempt in range(1, self.max_retries + 1):
            logger.debug("%s %s", method, url)
            response = self._session.request(
                method, url, params=params, json=json, headers=self._headers()
            )
            if response.status_code < 400:
                return response
            if response.status_code not in RETRY_STATUS_CODES:
                response.raise_for_status()
            if attempt == self.max_retries:
                response.raise_for_status()

            retry_after = response.headers.get("Retry-After")
            if retry_after and retry_after.isdigit():
                delay = float(retry_after)
            else:
                delay = self.base_delay * (2 ** (attempt - 1))
                delay += random.uniform(0, 0.5)  # jitter
            logger.warning(
                "Management API %s error. Retrying in %.1f seconds (attempt %d/%d)",
                response.status_code,
                delay,
                attempt,
                self.max_retries,
            )
            time.sleep(delay)
        raise RuntimeError("Unreachable")

    def _paged_fetch(
        self, url: str, params: dict[str, str]
    ) -> Iterator[tuple[list[dict[str, Any]], requests.Response]]:
        """Yield each page of a listing, following the ``NextPageUri`` header.

        The next page URI already carries the query, so only the publisher
        identifier is re-added when missing.
        """
        response = self._request_with_retry("GET", url, params=params)
        page_number = 1
        logger.info("Fetched page %s", page_number)

        while True:
            yield response.json() or [], response

            next_link = response.headers.get(NEXT_PAGE_HEADER)
            if not next_link:
                break

            logger.debug("Fetching next page via %s", NEXT_PAGE_HEADER)
            response = self._request_with_retry(
                "GET", next_link, params=self._build_params(next_link)
            )
            page_number += 1
            logger.info("Fetched page %s", page_number)

    def _list_blobs(
        self,
        endpoint: str,
        content_type: ContentTypeLike,
        start_time: Timestamp | None,
        end_time: Timestamp | None,
    ) -> tuple[list[ContentBlob], requests.Response]:
        url = f"{self._base_url}/subscriptions/{endpoint}"
        params = self._build_params(
            url,
            contentType=_content_type_value(content_type),
            startTime=format_timestamp(start_time),
            endTime=format_timestamp(end_time),
        )
        blobs: list[ContentBlob] = []
        response = None
        for page, response in self._paged_fetch(url, params):
            blobs.extend(self._map_content_blob(item) for item in page)
        if not blobs:
            logger.info(
                "No %s were found for %s.", endpoint, _content_type_value(content_type)
            )
        return blobs, response

    @staticmethod
    def _map_subscription(payload: dict[str, Any]) -> Subscription:
        return Subscription(
            content_type=payload.get("contentType"),
            status=payload.get("status"),
            webhook=payload.get("webhook"),
            extra=payload,
        )

    @staticmethod
    def _map_content_blob(payload: dict[str, Any]) -> ContentBlob:
        return ContentBlob(
            content_type=payload.get("contentType"),
            content_id=payload.get("contentId"),
            content_uri=payload.get("contentUri"),
            content_created=payload.get("contentCreated"),
            content_expiration=payload.get("contentExpiration"),
            extra=payload,
        )

    def list_subscriptions(self) -> tuple[list[Subscription], requests.Response]:
        """List the tenant's current subscriptions."""
        url = f"{self._base_url}/subscriptions/list"
        response = self._request_with_retry("GET", url, params=self._build_params(url))
        return [self._map_subscription(item) for item in response.json()], response

    def start_subscription(
        self,
        content_type: ContentTypeLike,
        webhook: WebhookLike | None = None,
    ) -> tuple[Subscription | None, requests.Response]:
        """Start a subscription to a content type.

        Args:
            content_type: The content type to subscribe to.
            webhook: Optional webhook receiving notifications. Either a
                :class:`Webhook` or a mapping with ``address``, ``authId`` and
                ``expiration`` keys, sent verbatim.

        Returns:
            The subscription as reported by the API and the HTTP response.
        """
        url = f"{self._base_url}/subscriptions/start"
        params = self._build_params(url, contentType=_content_type_value(content_type))
        body = None
        if webhook is not None:
            payload = webhook.to_payload() if isinstance(webhook, Webhook) else dict(webhook)
            body = {"webhook": payload}

        response = self._request_with_retry("POST", url, params=params, json=body)
        if not response.content:
            return None, response
        return self._map_subscription(response.json()), response

    def stop_subscription(
        self, content_type: ContentTypeLike
    ) -> tuple[None, requests.Response]:
        """Stop a subscription. The API answers with no content."""
        url = f"{self._base_url}/subscriptions/stop"
        params = self._build_params(url, contentType=_content_type_value(content_type))
        response = self._request_with_retry("POST", url, params=params)
        return None, response

    def list_content(
        self,
        content_type: ContentTypeLike,
        start_time: Timestamp | None = None,
        end_time: Timestamp | None = None,
    ) -> tuple[list[ContentBlob], requests.Response]:
        """List available content blobs, across all pages.

        Both bounds are optional; the API defaults to the last 24 hours and
        requires that both or neither are given.
        """
        return self._list_blobs("content", content_type, start_time, end_time)

    def list_notifications(
        self,
        content_type: ContentTypeLike,
        start_time: Timestamp | None = None,
        end_time: Timestamp | None = None,
    ) -> tuple[list[ContentBlob], requests.Response]:
        """List notifications sent to the subscription's webhook, across all pages."""
        return self._list_blobs("notifications", content_type, start_time, end_time)

    def fetch_content(self, content_uri: str) -> tuple[Any, requests.Response]:
        """Retrieve the records behind a content URI as decoded JSON."""
        response = self._request_with_retry(
            "GET", content_uri, params=self._build_params(content_uri)
        )
        return response.json(), response
