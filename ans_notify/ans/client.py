"""ANS client — delivers events to the Alert Notification Service producer API."""

from __future__ import annotations

import abc
from types import TracebackType

import httpx
import structlog

from ans_notify.ans.auth import AUTH_HEADER_KEY, AuthHeaderProvider
from ans_notify.ans.exceptions import (
    ANSAuthError,
    ANSBodyReadError,
    ANSTransportError,
    ANSUnexpectedStatusError,
)
from ans_notify.ans.types import Event

logger = structlog.get_logger(__name__)

EVENT_PATH = "/cf/producer/v1/resource-events"

EXPECTED_STATUS = int(httpx.codes.ACCEPTED)


class Client(abc.ABC):
    """Anything that can deliver an ANS event."""

    @abc.abstractmethod
    def send(self, event: Event) -> None:
        """Deliver *event*, raising an ``ANSError`` on failure."""


class ANSClient(Client):
    """Sends events to ANS with one synchronous POST per event.

    No retries: every failure is raised to the caller. Pass an ``httpx.Client``
    to control transport settings; otherwise one is created lazily and
    released by :meth:`close`.

    Usage::

        with ANSClient(url, XsuaaAuth.from_service_key(key)) as client:
            client.send(Event(subject="hello", body="world"))
    """

    def __init__(
        self,
        url: str,
        auth: AuthHeaderProvider,
        http: httpx.Client | None = None,
        timeout_secs: float = 10.0,
    ) -> None:
        self._url = url.rstrip("/")
        self._auth = auth
        self._http = http
        self._owns_http = http is None
        self._timeout_secs = timeout_secs

    @property
    def url(self) -> str:
        return self._url

    @property
    def event_url(self) -> str:
        return self._url + EVENT_PATH

    def _get_http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(timeout=httpx.Timeout(self._timeout_secs))
            self._owns_http = True
        elif self._http.is_closed:
            raise ANSTransportError(
                f"ANS http request to '{self.event_url}' failed: client is closed"
            )
        return self._http

    def send(self, event: Event) -> None:
        """POST *event* to ANS; returns only when the backend answered 202.

        Raises:
            ANSSerializationError: The event could not be encoded.
            ANSAuthError: No Authorization header could be obtained.
            ANSTransportError: The request failed at the network level.
            ANSUnexpectedStatusError: The backend answered with another status.
        """
        payload = event.to_json()

        headers = httpx.Headers()
        try:
            self._auth.set_auth_header_if_not_present(headers)
        except ANSAuthError:
            raise
        except Exception as exc:
            raise ANSAuthError(f"setting the Authorization header failed: {exc}") from exc

        url = self.event_url
        request_headers = {
            AUTH_HEADER_KEY: headers.get(AUTH_HEADER_KEY, ""),
            "Content-Type": "application/json",
        }

        http = self._get_http()
        try:
            request = http.build_request(
                "POST", url, content=payload.encode(), headers=request_headers,
            )
            response = http.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ANSTransportError(f"ANS http request to '{url}' failed: {exc}") from exc

        try:
            if response.status_code == EXPECTED_STATUS:
                logger.debug(
                    "ans_event_sent",
                    url=url,
                    event_type=event.event_type,
                    severity=event.severity,
                )
                return
            raise self._status_error(url, response)
        finally:
            response.close()

    def _status_error(self, url: str, response: httpx.Response) -> ANSUnexpectedStatusError:
        try:
            response.read()
        except httpx.HTTPError as exc:
            read_error = ANSBodyReadError(f"reading ANS response body failed: {exc}")
            read_error.__cause__ = exc
            error = ANSUnexpectedStatusError.body_unreadable(
                url, EXPECTED_STATUS, response.status_code, exc,
            )
            error.__cause__ = read_error
        else:
            error = ANSUnexpectedStatusError(
                url, EXPECTED_STATUS, response.status_code, body=response.text,
            )
        logger.warning(
            "ans_send_failed",
            url=url,
            status=response.status_code,
            body=(error.body or "")[:200],
        )
        return error

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http is not None and self._owns_http:
            self._http.close()
            self._http = None

    def __enter__(self) -> ANSClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
