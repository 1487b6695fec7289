"""Exception hierarchy for the Alert Notification Service client."""

from __future__ import annotations


class ANSError(Exception):
    """Base exception for all ANS client errors."""


class ANSParseError(ANSError):
    """A service key or event payload is not valid JSON of the expected shape."""


class ANSSerializationError(ANSError):
    """An event could not be encoded as JSON."""


class ANSAuthError(ANSError):
    """The Authorization header could not be obtained."""


class ANSTransportError(ANSError):
    """The request could not be sent or no response was received."""


class ANSBodyReadError(ANSError):
    """Reading the body of an error response failed."""


class ANSUnexpectedStatusError(ANSError):
    """The ANS backend answered with a status other than the expected one."""

    def __init__(
        self,
        url: str,
        expected_status: int,
        status_code: int,
        body: str | None = None,
    ) -> None:
        self.url = url
        self.expected_status = expected_status
        self.status_code = status_code
        self.body = body
        message = (
            f"ANS http request to '{url}' failed. Did not get expected status code "
            f"{expected_status}; instead got {status_code}"
        )
        if body is not None:
            message = f"{message}; response body: {body}"
        super().__init__(message)

    @classmethod
    def body_unreadable(
        cls,
        url: str,
        expected_status: int,
        status_code: int,
        cause: BaseException,
    ) -> ANSUnexpectedStatusError:
        """Build the error for a failed response whose body could not be read."""
        err = cls(url, expected_status, status_code)
        err.args = (f"{err.args[0]}; reading response body failed: {cause}",)
        return err
