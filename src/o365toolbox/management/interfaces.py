from __future__ import annotations

from typing import Any, Protocol

from .models import ContentBlob, ContentTypeLike, Subscription, Timestamp, WebhookLike


class ManagementClient(Protocol):
    """Protocol for Management Activity API operations on one tenant.

    Every method returns ``(result, response)`` where ``response`` is the
    HTTP response of the (last) request made, and raises on failure.
    """

    def list_subscriptions(self) -> tuple[list[Subscription], Any]:
        """List the tenant's current subscriptions."""
        raise NotImplementedError

    def start_subscription(
        self,
        content_type: ContentTypeLike,
        webhook: WebhookLike | None = None,
    ) -> tuple[Subscription | None, Any]:
        """Start a subscription, optionally registering a webhook."""
        raise NotImplementedError

    def stop_subscription(self, content_type: ContentTypeLike) -> tuple[None, Any]:
        """Stop a subscription."""
        raise NotImplementedError

    def list_content(
        self,
        content_type: ContentTypeLike,
        start_time: Timestamp | None = None,
        end_time: Timestamp | None = None,
    ) -> tuple[list[ContentBlob], Any]:
        """List content blobs available in a time range."""
        raise NotImplementedError

    def list_notifications(
        self,
        content_type: ContentTypeLike,
        start_time: Timestamp | None = None,
        end_time: Timestamp | None = None,
    ) -> tuple[list[ContentBlob], Any]:
        """List webhook notifications sent in a time range."""
        raise NotImplementedError

    def fetch_content(self, content_uri: str) -> tuple[Any, Any]:
        """Retrieve the audit records behind a content URI."""
        raise NotImplementedError
