"""Construction of outbound catalog API requests.

The builders are pure functions of their inputs. They do not validate codes
or tokens; a malformed input produces a request the API will reject. Query
parameters are kept unencoded and left to httpx.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import quote

DEFAULT_API_BASE = "https://api.music.apple.com"
DEFAULT_SEARCH_LIMIT = 10
DEFAULT_SEARCH_TYPES = ("songs", "albums")

USER_TOKEN_HEADER = "Music-User-Token"


@dataclass(frozen=True)
class RequestDescriptor:
    """Method, absolute URL, headers and query parameters of a catalog API request.

    Headers and params are stored as read-only mappings.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, str | int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


def _authorization_headers(bearer_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {bearer_token}"}


def _api_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}{path}"


def build_search_request(
    term: str,
    country_code: str,
    bearer_token: str,
    *,
    limit: int = DEFAULT_SEARCH_LIMIT,
    types: tuple[str, ...] = DEFAULT_SEARCH_TYPES,
    base_url: str = DEFAULT_API_BASE,
) -> RequestDescriptor:
    """Build a catalog search request scoped to a storefront.

    Args:
        term: Search term, passed through unencoded
        country_code: Storefront code (e.g. "us")
        bearer_token: Developer token
        limit: Maximum results per bucket
        types: Resource types to search
        base_url: Catalog API base URL

    Returns:
        RequestDescriptor for GET /v1/catalog/{storefront}/search
    """
    path = f"/v1/catalog/{quote(country_code, safe='')}/search"
    return RequestDescriptor(
        method="GET",
        url=_api_url(base_url, path),
        headers=_authorization_headers(bearer_token),
        params={"term": term, "limit": limit, "types": ",".join(types)},
    )


def build_storefront_lookup_request(
    region_code: str,
    bearer_token: str,
    *,
    base_url: str = DEFAULT_API_BASE,
) -> RequestDescriptor:
    """Build a request resolving a region code to a storefront."""
    path = f"/v1/storefronts/{quote(region_code, safe='')}"
    return RequestDescriptor(
        method="GET",
        url=_api_url(base_url, path),
        headers=_authorization_headers(bearer_token),
    )


def build_user_storefront_request(
    bearer_token: str,
    user_token: str,
    *,
    base_url: str = DEFAULT_API_BASE,
) -> RequestDescriptor:
    """Build a request for the storefront of the authenticated user."""
    headers = _authorization_headers(bearer_token)
    headers[USER_TOKEN_HEADER] = user_token
    return RequestDescriptor(
        method="GET",
        url=_api_url(base_url, "/v1/me/storefront"),
        headers=headers,
    )
