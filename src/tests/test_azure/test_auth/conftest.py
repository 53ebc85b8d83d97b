from __future__ import annotations

from typing import Any

import pytest

import o365toolbox.azure.auth.factory as factory


def _make_recorder(name: str) -> type:
    """Create a credential class that captures its init kwargs."""

    class _C:
        last_args: tuple[Any, ...] | None = None
        last_kwargs: dict[str, Any] | None = None
        call_count: int = 0

        def __init__(self, *args: Any, **kwargs: Any) -> None:
            type(self).last_args = args
            type(self).last_kwargs = dict(kwargs)
            type(self).call_count += 1

    _C.__name__ = _C.__qualname__ = name
    return _C


@pytest.fixture()
def recorded_credentials(monkeypatch: pytest.MonkeyPatch) -> dict[str, type]:
    """Replace the credential classes the factory uses with recorders.

    Returns:
        dict[str, type]: Recorder classes by credential class name.
    """
    names = [
        "ClientSecretCredential",
        "CertificateCredential",
        "ManagedIdentityCredential",
    ]
    recorders = {n: _make_recorder(n) for n in names}
    for n, klass in recorders.items():
        monkeypatch.setattr(factory, n, klass)
    return recorders
