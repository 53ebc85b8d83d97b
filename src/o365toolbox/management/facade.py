from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Mapping

from o365toolbox.azure.auth.config import AuthConfig

from .context import build_management_client
from .errors import ManagementApiError, Operation
from .interfaces import ManagementClient
from .models import CallResult, ContentTypeLike, Timestamp, WebhookLike

logger = logging.getLogger(__name__)

Callback = Callable[[Any, Any, Any, Any], Any]


class O365Management:
    """Entry point for the Office 365 Management Activity API.

    Each operation runs on the instance's thread pool and returns a
    :class:`~concurrent.futures.Future` resolving to a :class:`CallResult`.
    If a ``callback`` is given it is called exactly once with
    ``(error, result, request, response)`` before the future resolves.
    Failures never raise from the future; they are delivered as a
    :class:`ManagementApiError` in the ``error`` slot.
    """

    def __init__(
        self,
        config: AuthConfig | None = None,
        *,
        client: ManagementClient | None = None,
        max_workers: int | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            config: Credential configuration. Read from the environment when
                omitted; missing values raise ``pydantic.ValidationError``.
            client: A prebuilt client. When given, no credential is created.
            max_workers: Size of the thread pool running the calls.
        """
        self._credential = None
        self._shared = False
        if client is None:
            client, self._credential = build_management_client(config or AuthConfig())
        self._client = client
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="o365-mgmt"
        )

    @property
    def client(self) -> ManagementClient:
        return self._client

    def close(self) -> None:
        """Wait for in-flight calls and release the thread pool."""
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "O365Management":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        # The process-wide instance outlives any single ``with`` block.
        if not self._shared:
            self.close()

    def _run(
        self,
        operation: Operation,
        params: Mapping[str, Any],
        call: Callable[[], tuple[Any, Any]],
        callback: Callback | None,
    ) -> CallResult:
        try:
            result, response = call()
        except Exception as exc:
            error = ManagementApiError(operation, params, exc)
            logger.warning("%s", error)
            outcome = CallResult(error, None, error.request, error.response)
        else:
            request = getattr(response, "request", None)
            outcome = CallResult(None, result, request, response)

        if callback is not None:
            try:
                callback(*outcome)
            except Exception:
                logger.exception("Callback for %s raised", operation.value)
        return outcome

    def _submit(
        self,
        operation: Operation,
        params: Mapping[str, Any],
        call: Callable[[], tuple[Any, Any]],
        callback: Callback | None,
    ) -> Future:
        logger.debug("Submitting %s %s", operation.value, dict(params))
        return self._executor.submit(self._run, operation, params, call, callback)

    def subscriptions_list(self, callback: Callback | None = None) -> Future:
        """List current subscriptions.

        See https://learn.microsoft.com/office/office-365-management-api/office-365-management-activity-api-reference#list-current-subscriptions
        """
        return self._submit(
            Operation.SUBSCRIPTIONS_LIST,
            {},
            self._client.list_subscriptions,
            callback,
        )

    def subscriptions_start(
        self,
        content_type: ContentTypeLike,
        webhook: WebhookLike | None = None,
        callback: Callback | None = None,
    ) -> Future:
        """Start a subscription to ``content_type``, optionally with a webhook."""
        return self._submit(
            Operation.SUBSCRIPTIONS_START,
            {"content_type": content_type, "webhook": webhook},
            lambda: self._client.start_subscription(content_type, webhook),
            callback,
        )

    def subscriptions_stop(
        self, content_type: ContentTypeLike, callback: Callback | None = None
    ) -> Future:
        """Stop the subscription to ``content_type``."""
        return self._submit(
            Operation.SUBSCRIPTIONS_STOP,
            {"content_type": content_type},
            lambda: self._client.stop_subscription(content_type),
            callback,
        )

    def subscriptions_content(
        self,
        content_type: ContentTypeLike,
        start_ts: Timestamp | None = None,
        end_ts: Timestamp | None = None,
        callback: Callback | None = None,
    ) -> Future:
        """List content blobs available between ``start_ts`` and ``end_ts`` (UTC)."""
        return self._submit(
            Operation.SUBSCRIPTIONS_CONTENT,
            {"content_type": content_type, "start_ts": start_ts, "end_ts": end_ts},
            lambda: self._client.list_content(content_type, start_ts, end_ts),
            callback,
        )

    def subscriptions_notifications(
        self,
        content_type: ContentTypeLike,
        start_ts: Timestamp | None = None,
        end_ts: Timestamp | None = None,
        callback: Callback | None = None,
    ) -> Future:
        """List notifications sent between ``start_ts`` and ``end_ts`` (UTC)."""
        return self._submit(
            Operation.SUBSCRIPTIONS_NOTIFICATIONS,
            {"content_type": content_type, "start_ts": start_ts, "end_ts": end_ts},
            lambda: self._client.list_notifications(content_type, start_ts, end_ts),
            callback,
        )

    def get_content(
        self, content_uri: str, callback: Callback | None = None
    ) -> Future:
        """Fetch the content behind a URI from a content or notification listing."""
        return self._submit(
            Operation.FETCH_CONTENT,
            {"content_uri": content_uri},
            lambda: self._client.fetch_content(content_uri),
            callback,
        )


_shared: O365Management | None = None
_shared_lock = threading.Lock()


def get_management() -> O365Management:
    """Return the process-wide facade, built from the environment on first use.

    The instance is built once even under concurrent first calls. Leaving a
    ``with`` block does not close it; call :func:`reset_management` to
    release it.
    """
    global _shared
    if _shared is None:
        with _shared_lock:
            if _shared is None:
                instance = O365Management()
                instance._shared = True
                _shared = instance
    return _shared


def reset_management() -> None:
    """Close and forget the process-wide facade, if one was built."""
    global _shared
    with _shared_lock:
        instance, _shared = _shared, None
    if instance is not None:
        instance.close()
