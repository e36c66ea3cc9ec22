"""Terraform Provider - Connection configuration for an HCP Terraform / TFE API."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from functools import cached_property
from typing import TYPE_CHECKING, Any, Self

import requests
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from tfvar_export.engine.ratelimit import RateLimiter
from tfvar_export.errors import ApiError

if TYPE_CHECKING:
    from tfvar_export.core.workspaces import WorkspaceDirectory
    from tfvar_export.engine.client import RemoteVariableClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.terraform.io"
API_PREFIX = "/api/v2"
CONTENT_TYPE = "application/vnd.api+json"

_EXCERPT_LEN = 300


def _excerpt(text: str) -> str:
    text = text.strip()
    return text if len(text) <= _EXCERPT_LEN else text[:_EXCERPT_LEN] + "..."


class TokenAuth(BaseModel):
    """Bearer token authentication (user, team or organization token)."""

    token: SecretStr


class TerraformProvider(BaseModel):
    """Connection configuration for the Terraform API.

    Every request goes through :meth:`request`, which waits on the shared
    :class:`RateLimiter` first.  For tests, use :meth:`from_session` to inject
    a session double.

    Examples:
        provider = TerraformProvider(
            organization="my-org",
            auth=TokenAuth(token="..."),
        )
        provider.workspaces.resolve("networking-prod")
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    base_url: str = DEFAULT_BASE_URL
    organization: str | None = None
    auth: TokenAuth | None = None
    timeout: float = 30.0
    page_size: int = 100
    limiter: RateLimiter = Field(default_factory=RateLimiter)

    # Injected session (for testing)
    _injected_session: requests.Session | None = None

    @classmethod
    def from_session(
        cls,
        session: requests.Session,
        *,
        organization: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        limiter: RateLimiter | None = None,
    ) -> Self:
        """Create a provider around a pre-configured (or mock) session."""
        provider = cls(
            base_url=base_url,
            organization=organization,
            limiter=limiter if limiter is not None else RateLimiter.unlimited(),
        )
        provider._injected_session = session
        return provider

    @cached_property
    def session(self) -> requests.Session:
        """Get the HTTP session."""
        if self._injected_session is not None:
            return self._injected_session

        if self.auth is None:
            raise ValueError("Either provide auth, or use TerraformProvider.from_session()")

        session = requests.Session()
        session.headers.update(
            {
                "Authorization": f"Bearer {self.auth.token.get_secret_value()}",
                "Content-Type": CONTENT_TYPE,
                "Accept": CONTENT_TYPE,
            }
        )
        return session

    def url(self, path: str) -> str:
        """Build an absolute API URL. Absolute URLs (pagination links) pass through."""
        if path.startswith(("http://", "https://")):
            return path
        base = self.base_url.rstrip("/")
        if not base.endswith(API_PREFIX):
            base += API_PREFIX
        return base + path

    def request(
        self,
        method: str,
        path: str,
        *,
        expected: int,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Send one rate-limited request and return the decoded JSON body.

        Returns ``None`` for empty bodies (e.g. ``204 No Content``).

        Raises:
            ApiError: On transport failure, an unexpected status code, or a
                body that is not a JSON object.
        """
        url = self.url(path)
        self.limiter.wait()
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method, url, params=params, json=json, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise ApiError(str(exc), method=method, url=url) from exc

        if response.status_code != expected:
            raise ApiError(
                f"expected status {expected}: {_excerpt(response.text)}",
                method=method,
                url=url,
                status=response.status_code,
            )
        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(
                "response body is not valid JSON", method=method, url=url, status=expected
            ) from exc
        if not isinstance(body, dict):
            raise ApiError(
                "response body is not a JSON object", method=method, url=url, status=expected
            )
        return body

    def paginate(self, path: str, *, params: dict[str, Any] | None = None) -> Iterator[Any]:
        """Yield every ``data`` item of a paginated listing.

        Follows ``links.next`` when present, falling back to
        ``meta.pagination.next-page``.
        """
        next_path: str | None = path
        next_params = dict(params or {})
        while next_path is not None:
            body = self.request("GET", next_path, expected=200, params=next_params or None)
            assert body is not None
            data = body.get("data")
            if not isinstance(data, list):
                raise ApiError("listing response has no 'data' array", method="GET", url=next_path)
            yield from data

            next_link = (body.get("links") or {}).get("next")
            next_page = ((body.get("meta") or {}).get("pagination") or {}).get("next-page")
            if next_link:
                next_path, next_params = next_link, {}
            elif next_page:
                next_params = {**next_params, "page[number]": next_page}
            else:
                next_path = None

    # API surfaces
    @cached_property
    def workspaces(self) -> WorkspaceDirectory:
        from tfvar_export.core.workspaces import WorkspaceDirectory

        return WorkspaceDirectory(self)

    @cached_property
    def variables(self) -> RemoteVariableClient:
        from tfvar_export.engine.client import RemoteVariableClient

        return RemoteVariableClient(self)
