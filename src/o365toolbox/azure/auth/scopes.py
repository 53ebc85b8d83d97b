from typing import Final
from urllib.parse import urlsplit

MANAGEMENT_RESOURCE: Final[str] = "https://manage.office.com"


def scope_from_resource(resource: str = MANAGEMENT_RESOURCE) -> str:
    """Return the ``/.default`` scope for an API resource URL.

    Only the scheme and host count: ``https://manage.office.com/api/v1.0``
    and ``https://manage.office.com`` share one scope.

    Raises:
        ValueError: If ``resource`` is not an absolute URL with a host.
    """
    parts = urlsplit(resource)
    if not (parts.scheme and parts.netloc):
        raise ValueError(f"resource must be an absolute URL, got {resource!r}")
    return f"{parts.scheme}://{parts.netloc}/.default"
