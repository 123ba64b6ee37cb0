"""Python client and view helpers for the membership API."""

from membership.client.api import (
    ApiError,
    ConnectionLost,
    MembershipApiClient,
    SessionExpired,
)
from membership.client.casing import camelize_keys, to_camel_case
from membership.client.pagination import LimitedView, Paginator, limited_view, paginate

__all__ = [
    "ApiError",
    "ConnectionLost",
    "MembershipApiClient",
    "SessionExpired",
    "camelize_keys",
    "to_camel_case",
    "LimitedView",
    "Paginator",
    "limited_view",
    "paginate",
]
