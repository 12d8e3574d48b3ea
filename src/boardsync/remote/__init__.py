"""Remote package - holds the settings service client, models, and errors."""

from .api import AsyncSettingsClient, SettingsAPI, create_settings_client
from .errors import (
    AuthenticationError,
    ClientError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    ServerError,
    SettingsAPIError,
)
from .models import (
    BoardBackground,
    FetchResult,
    ProjectSettings,
    ProjectSettingsResponse,
    SettingsLoaded,
    SettingsUnavailable,
)

# Define what gets imported with: from boardsync.remote import *
__all__ = [
    "AsyncSettingsClient",
    "AuthenticationError",
    "BoardBackground",
    "ClientError",
    "FetchResult",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "ProjectSettings",
    "ProjectSettingsResponse",
    "RateLimitError",
    "ServerError",
    "SettingsAPI",
    "SettingsAPIError",
    "SettingsLoaded",
    "SettingsUnavailable",
    "create_settings_client",
]
