"""HTTP client for the project settings service."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Final

import requests
from pydantic import ValidationError
from typing_extensions import TypedDict

from boardsync.settings import UserSettings

from .errors import NetworkError, ParseError, SettingsAPIError
from .models import FetchResult, ProjectSettingsResponse

logger: Final = logging.getLogger(__name__)

# API endpoints
PROJECT_SETTINGS_PATH: Final = "/api/settings/project"

# Human-readable explanations for common HTTP errors
HTTP_ERROR_MAP: Final = {
    400: "Bad request - check the project path",
    401: "Invalid or missing API key",
    403: "API key not allowed to read settings",
    404: "Settings endpoint not found",
    429: "Rate limit exceeded",
    500: "Settings service internal error",
    502: "Bad gateway in front of the settings service",
    503: "Settings service unavailable",
    504: "Gateway timeout",
}


class ProjectSettingsRequest(TypedDict):
    """Request body of the project settings endpoint."""

    projectPath: str


class SettingsAPI:
    """Blocking client for the settings service.

    Handles the HTTP request, maps transport and status errors onto the
    SettingsAPIError hierarchy, and validates the response body into a
    ProjectSettingsResponse. Retries network and 5xx errors when the user
    settings allow it.
    """

    def __init__(self, config: UserSettings) -> None:
        """Initialize the settings client.

        Args:
            config: Service URL, credentials, timeout and retry policy
        """
        self.config = config

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.api_key:
            headers["X-API-Key"] = self.config.api_key
        return headers

    def fetch_project_settings(self, project_path: str) -> ProjectSettingsResponse:
        """Retrieve the stored settings of one project.

        Args:
            project_path: Identity of the project, usually its directory

        Returns:
            Validated response envelope

        Raises:
            NetworkError: When the service cannot be reached
            AuthenticationError: When the API key is rejected
            ServerError: For 5xx responses
            ParseError: When the body is not a valid envelope
            SettingsAPIError: For other HTTP errors
        """
        attempts = self.config.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self._request(project_path)
            except SettingsAPIError as err:
                if not err.is_retryable or attempt == attempts:
                    raise
                delay = self.config.retry_backoff_seconds * attempt
                logger.info(
                    "Settings request for %s failed (%s), retry %d/%d in %.1fs",
                    project_path,
                    err.message,
                    attempt,
                    self.config.retries,
                    delay,
                )
                time.sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover

    def _request(self, project_path: str) -> ProjectSettingsResponse:
        url = self.config.endpoint(PROJECT_SETTINGS_PATH)
        body: ProjectSettingsRequest = {"projectPath": project_path}

        # one call per request: concurrent loads run in separate worker threads
        try:
            resp = requests.post(
                url, json=body, headers=self._headers(), timeout=self.config.timeout
            )
        except requests.RequestException as exc:
            logger.warning("Settings service network error: %s", exc)
            raise NetworkError(f"Network error: {exc}", exc) from exc

        if resp.status_code != 200:
            try:
                payload: dict[str, Any] = resp.json()
                if not isinstance(payload, dict):
                    payload = {}
            except ValueError:
                payload = {}
            payload.setdefault("error", HTTP_ERROR_MAP.get(resp.status_code, resp.text))
            logger.error("Settings service error: %s - %s", resp.status_code, payload["error"])
            raise SettingsAPIError.from_response(payload, resp.status_code)

        try:
            raw = resp.json()
        except ValueError as exc:
            raise ParseError(f"Response is not JSON: {exc}", exc) from exc

        if not isinstance(raw, dict):
            raise ParseError(f"Expected a JSON object, got {type(raw).__name__}")

        try:
            return ProjectSettingsResponse.model_validate(raw)
        except ValidationError as exc:
            raise ParseError(f"Invalid settings envelope: {exc}", exc) from exc


class AsyncSettingsClient:
    """Asyncio facade over SettingsAPI.

    The blocking request runs in a worker thread so the event loop stays
    free while the fetch is in flight.
    """

    def __init__(self, api: SettingsAPI) -> None:
        self.api = api

    async def get_project(self, project_path: str) -> FetchResult:
        """Fetch settings for *project_path* as a FetchResult.

        Raises:
            SettingsAPIError: When the request itself fails
        """
        response = await asyncio.to_thread(self.api.fetch_project_settings, project_path)
        return response.to_result()


def create_settings_client(config: UserSettings) -> AsyncSettingsClient:
    """Build the async client used by the project settings loader.

    Args:
        config: User settings with the service URL

    Returns:
        An AsyncSettingsClient backed by SettingsAPI
    """
    return AsyncSettingsClient(SettingsAPI(config))
