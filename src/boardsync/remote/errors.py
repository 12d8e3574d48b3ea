"""Failures of the project settings service client.

Every failure of a settings request is a SettingsAPIError. The loader
only logs them; the retry loop in SettingsAPI asks ``is_retryable`` to
decide whether the same project path is worth requesting again.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SettingsAPIError(Exception):
    """A settings request for one project failed.

    ``code`` is the HTTP status the service answered with, or 0 when no
    usable answer arrived (transport failure, unreadable body).
    """

    def __init__(
        self, code: int, message: str, response: Optional[Dict[str, Any]] = None
    ) -> None:
        """Initialize the exception.

        Args:
            code: HTTP status, or 0 when the service never answered
            message: Text shown in the log line of the failed load
            response: Decoded error body of the service, if it sent one
        """
        super().__init__(f"[{code}] {message}")
        self.code: int = code
        self.message: str = message
        self.response: Optional[Dict[str, Any]] = response

    @property
    def is_client_error(self) -> bool:
        """The request itself was refused (bad project path, key, quota)."""
        return 400 <= self.code < 500

    @property
    def is_server_error(self) -> bool:
        """The settings service or a gateway in front of it failed."""
        return self.code >= 500

    @property
    def is_retryable(self) -> bool:
        """Whether asking again for the same project may succeed.

        Refusals stay refusals, so the base answer is no.
        """
        return False

    @classmethod
    def from_response(
        cls, response: Dict[str, Any], status_code: int = 0
    ) -> SettingsAPIError:
        """Map a non-200 answer of the settings service to an error.

        The service reports failures as ``{"success": false, "error": ...}``;
        a ``message`` key is accepted as well.

        Args:
            response: Decoded error body, possibly empty
            status_code: HTTP status of the answer

        Returns:
            The SettingsAPIError subclass for *status_code*
        """
        message = response.get("error") or response.get("message")
        if status_code in _STATUS_ERRORS:
            error_cls, fallback = _STATUS_ERRORS[status_code]
        elif 400 <= status_code < 500:
            error_cls, fallback = ClientError, "Settings request rejected"
        elif status_code >= 500:
            error_cls, fallback = ServerError, "Settings service failed"
        else:
            error_cls, fallback = cls, "Unexpected settings service answer"
        return error_cls(status_code, message or fallback, response)


class NetworkError(SettingsAPIError):
    """The settings service could not be reached or timed out."""

    def __init__(
        self, message: str, original_error: Optional[Exception] = None
    ) -> None:
        """Initialize with the transport failure.

        Args:
            message: What went wrong on the wire
            original_error: The requests exception behind it
        """
        super().__init__(0, message)
        self.original_error = original_error

    @property
    def is_retryable(self) -> bool:
        return True


class AuthenticationError(SettingsAPIError):
    """The configured API key is missing, wrong, or not allowed to read settings."""


class NotFoundError(SettingsAPIError):
    """The settings endpoint is not served at the configured URL."""


class RateLimitError(SettingsAPIError):
    """Too many settings requests from this client."""


class ClientError(SettingsAPIError):
    """Any other refusal, typically a malformed project path."""


class ServerError(SettingsAPIError):
    """The service answered with a 5xx; the project may load on a later attempt."""

    @property
    def is_retryable(self) -> bool:
        return True


class ParseError(SettingsAPIError):
    """A 200 answer whose body is not a valid settings envelope."""

    def __init__(
        self, message: str, original_error: Optional[Exception] = None
    ) -> None:
        """Initialize with the decoding failure.

        Args:
            message: Why the body was rejected
            original_error: JSON or validation error behind it
        """
        super().__init__(0, message)
        self.original_error = original_error


_STATUS_ERRORS: Dict[int, tuple[type[SettingsAPIError], str]] = {
    401: (AuthenticationError, "API key rejected"),
    403: (AuthenticationError, "API key rejected"),
    404: (NotFoundError, "Settings endpoint not found"),
    429: (RateLimitError, "Too many settings requests"),
}
