"""OAuth bearer tokens for ANS — XSUAA client-credentials flow with caching."""

from __future__ import annotations

import threading
import time
from typing import Protocol
from urllib.parse import urlsplit

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ans_notify.ans.exceptions import ANSAuthError
from ans_notify.ans.types import ServiceKey

logger = structlog.get_logger(__name__)

AUTH_HEADER_KEY = "Authorization"

_TOKEN_PATH = "/oauth/token"

# Tokens closer than this to expiry are refreshed before use.
_EXPIRY_MARGIN_SECS = 60.0


class AuthHeaderProvider(Protocol):
    """Anything that can put an Authorization header on a request."""

    def set_auth_header_if_not_present(self, headers: httpx.Headers) -> None:
        """Add an ``Authorization`` entry unless *headers* already has one."""


class AuthToken(BaseModel):
    """Token response of the XSUAA token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    expires_at: float = 0.0

    @property
    def header_value(self) -> str:
        return f"{self.token_type} {self.access_token}"

    def is_valid(self, now: float) -> bool:
        return now + _EXPIRY_MARGIN_SECS < self.expires_at


class XsuaaAuth:
    """Fetches and caches bearer tokens from an XSUAA OAuth server.

    Thread-safe: one instance may be shared by concurrent senders.
    """

    def __init__(
        self,
        oauth_url: str,
        client_id: str,
        client_secret: str,
        http: httpx.Client | None = None,
        timeout_secs: float = 10.0,
    ) -> None:
        self._oauth_url = oauth_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._http = http
        self._timeout_secs = timeout_secs
        self._lock = threading.Lock()
        self._cached: AuthToken | None = None

    @classmethod
    def from_service_key(
        cls,
        key: ServiceKey,
        http: httpx.Client | None = None,
        timeout_secs: float = 10.0,
    ) -> XsuaaAuth:
        return cls(
            oauth_url=key.oauth_url,
            client_id=key.client_id,
            client_secret=key.client_secret.get_secret_value(),
            http=http,
            timeout_secs=timeout_secs,
        )

    @property
    def token_url(self) -> str:
        parts = urlsplit(self._oauth_url)
        if not parts.scheme or not parts.netloc:
            raise ANSAuthError(f"invalid OAuth URL {self._oauth_url!r}")
        return f"{parts.scheme}://{parts.netloc}{_TOKEN_PATH}"

    def set_auth_header_if_not_present(self, headers: httpx.Headers) -> None:
        if headers.get(AUTH_HEADER_KEY):
            return
        headers[AUTH_HEADER_KEY] = self.get_token().header_value

    def get_token(self) -> AuthToken:
        """Return the cached token, fetching a new one when it is about to expire."""
        with self._lock:
            now = time.time()
            if self._cached is None or not self._cached.is_valid(now):
                self._cached = self._fetch_token(now)
            return self._cached

    def _fetch_token(self, now: float) -> AuthToken:
        url = self.token_url
        params = {
            "grant_type": "client_credentials",
            "response_type": "token",
            "client_id": self._client_id,
        }
        auth = httpx.BasicAuth(self._client_id, self._client_secret)

        try:
            if self._http is not None:
                response = self._http.post(url, params=params, auth=auth)
            else:
                with httpx.Client(timeout=httpx.Timeout(self._timeout_secs)) as http:
                    response = http.post(url, params=params, auth=auth)
        except httpx.HTTPError as exc:
            raise ANSAuthError(f"fetching bearer token from '{url}' failed: {exc}") from exc

        if response.status_code != 200:
            raise ANSAuthError(
                f"fetching bearer token from '{url}' failed. Did not get expected "
                f"status code 200; instead got {response.status_code}; "
                f"response body: {response.text}"
            )

        try:
            token = AuthToken.model_validate_json(response.content)
        except ValidationError as exc:
            raise ANSAuthError(f"unexpected token response from '{url}': {exc}") from exc

        token.expires_at = now + token.expires_in
        logger.debug("xsuaa_token_fetched", url=url, expires_in=token.expires_in)
        return token
