"""User-configurable settings loaded from a YAML config file."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import ClassVar, Literal
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

# Load environment variables from .env file(s)
load_dotenv()


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class UserSettings(BaseModel):
    """Connection and runtime settings for the settings service client.

    These values come from the user's config file; everything except
    ``server_url`` has a default.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("boardsync.yaml"),
        Path("~/.config/boardsync/config.yaml").expanduser(),
        Path("/etc/boardsync/config.yaml"),
    ]

    # Service settings
    server_url: str = Field(..., description="Base URL of the settings service")
    api_key: str | None = Field(None, description="Value sent in the X-API-Key header")
    timeout: float = Field(10.0, gt=0, description="HTTP timeout in seconds")

    # Retry policy
    retries: int = Field(0, ge=0, le=5, description="Extra attempts on network/5xx errors")
    retry_backoff_seconds: float = Field(
        0.5, ge=0, description="Delay before retry n is n times this value"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ---- validators ----
    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"server_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str | None) -> str | None:
        # "${VAR}" with VAR unset interpolates to an empty string
        return v or None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    # ---- convenience methods ----
    def endpoint(self, path: str) -> str:
        """Join *path* onto the server URL.

        Args:
            path: Endpoint path such as ``/api/settings/project``

        Returns:
            Absolute URL
        """
        return f"{self.server_url}/{path.lstrip('/')}"

    @classmethod
    def load(cls, path: Path | None = None) -> UserSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations if None)

        Returns:
            Validated UserSettings object

        Raises:
            FileNotFoundError: If no config file is found
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        # Try to find config file
        if path is None:
            # Check environment variable first
            env_path = os.environ.get("BOARDSYNC_CONFIG")
            if env_path:
                path = Path(env_path)
                if not path.exists():
                    raise FileNotFoundError(f"Config file from BOARDSYNC_CONFIG not found: {path}")
            else:
                # Try default paths
                for default_path in cls.DEFAULT_CONFIG_PATHS:
                    if default_path.exists():
                        path = default_path
                        break
                else:
                    raise FileNotFoundError(
                        "No configuration file found. Create boardsync.yaml or set "
                        "BOARDSYNC_CONFIG."
                    )

        # Load and parse config
        import yaml  # local import to avoid hard dep for callers

        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw)
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        if not isinstance(data, dict):
            raise RuntimeError(f"Invalid configuration: expected a mapping in {path}")

        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err
