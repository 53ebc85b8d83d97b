from __future__ import annotations

from typing import Iterator

import pytest

CONFIG_ENV_VARS = [
    "AUTH_STRATEGY",
    "CUSTOMCONNSTR_APP_CLIENT_ID",
    "APP_CLIENT_ID",
    "CLIENT_ID",
    "CUSTOMCONNSTR_APP_CLIENT_SECRET",
    "APP_CLIENT_SECRET",
    "CLIENT_SECRET",
    "APP_TENANT_ID",
    "TENANT_ID",
    "CLIENT_CERTIFICATE_PATH",
    "CLIENT_CERTIFICATE_PASSWORD",
    "AUTHORITY_HOST",
    "MANAGEMENT_RESOURCE",
    "PUBLISHER_IDENTIFIER",
]


@pytest.fixture(autouse=True)
def clear_config_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove configuration variables to prevent cross-test leakage.

    Yields:
        Iterator[None]: Context manager semantics for pytest.
    """
    for k in CONFIG_ENV_VARS:
        monkeypatch.delenv(k, raising=False)
        monkeypatch.delenv(k.lower(), raising=False)
    yield
