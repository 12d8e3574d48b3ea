# src/boardsync/protocols.py
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from boardsync.remote.errors import NetworkError
from boardsync.remote.models import (
    BoardBackground,
    FetchResult,
    SettingsLoaded,
    SettingsUnavailable,
)


@runtime_checkable
class SettingsClient(Protocol):
    """Protocol for anything that can fetch a project's stored settings.

    Implementations may raise on transport failures; the loader isolates
    those errors.
    """

    async def get_project(self, project_path: str) -> FetchResult:
        """Fetch the settings stored for a project.

        Args:
            project_path: Project identity

        Returns:
            SettingsLoaded or SettingsUnavailable
        """
        ...


@runtime_checkable
class BackgroundSetters(Protocol):
    """Silent per-project setters for the board appearance.

    Each setter changes one field of one project's state and must not
    write anything back to the settings service.
    """

    def set_board_background(self, project_path: str, image_path: str | None) -> None: ...

    def set_card_opacity(self, project_path: str, opacity: float) -> None: ...

    def set_column_opacity(self, project_path: str, opacity: float) -> None: ...

    def set_column_border_enabled(self, project_path: str, enabled: bool) -> None: ...

    def set_card_glassmorphism(self, project_path: str, enabled: bool) -> None: ...

    def set_card_border_enabled(self, project_path: str, enabled: bool) -> None: ...

    def set_card_border_opacity(self, project_path: str, opacity: float) -> None: ...

    def set_hide_scrollbar(self, project_path: str, hide: bool) -> None: ...


class MockSettingsClient:
    """In-memory SettingsClient for testing.

    Backgrounds are given as raw camelCase dicts, exactly as the service
    would send them. Each project can be delayed or gated by an event to
    control completion order.
    """

    def __init__(
        self,
        backgrounds: Mapping[str, Mapping[str, Any] | None] | None = None,
        delays: Mapping[str, float] | None = None,
    ) -> None:
        self.backgrounds: dict[str, Mapping[str, Any] | None] = dict(backgrounds or {})
        self.delays: dict[str, float] = dict(delays or {})
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []

    def gate(self, project_path: str) -> asyncio.Event:
        """Hold fetches for *project_path* until the returned event is set."""
        return self.gates.setdefault(project_path, asyncio.Event())

    async def get_project(self, project_path: str) -> FetchResult:
        """Record the call and answer from ``backgrounds``."""
        self.calls.append(project_path)
        if project_path in self.gates:
            await self.gates[project_path].wait()
        await asyncio.sleep(self.delays.get(project_path, 0))

        raw = self.backgrounds.get(project_path)
        if raw is None:
            return SettingsLoaded(None)
        return SettingsLoaded(BoardBackground.from_lenient(dict(raw)))

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.calls = []


class ErrorSimulatingSettingsClient(MockSettingsClient):
    """Settings client mock that can fail for selected projects."""

    def __init__(
        self,
        backgrounds: Mapping[str, Mapping[str, Any] | None] | None = None,
        raise_for: list[str] | None = None,
        unavailable_for: list[str] | None = None,
    ) -> None:
        """Initialize with the projects that should fail.

        Args:
            backgrounds: Answers for the projects that succeed
            raise_for: Projects whose fetch raises a NetworkError
            unavailable_for: Projects answered with ``success: false``
        """
        super().__init__(backgrounds)
        self.raise_for = raise_for or []
        self.unavailable_for = unavailable_for or []

    async def get_project(self, project_path: str) -> FetchResult:
        """Either fail or answer normally based on configuration."""
        if project_path in self.raise_for:
            self.calls.append(project_path)
            raise NetworkError("Simulated settings service outage")
        if project_path in self.unavailable_for:
            self.calls.append(project_path)
            return SettingsUnavailable("Simulated service failure")
        return await super().get_project(project_path)


class RecordingSetters:
    """BackgroundSetters implementation that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []

    def _record(self, name: str, project_path: str, value: Any) -> None:
        self.calls.append((name, project_path, value))

    def set_board_background(self, project_path: str, image_path: str | None) -> None:
        self._record("set_board_background", project_path, image_path)

    def set_card_opacity(self, project_path: str, opacity: float) -> None:
        self._record("set_card_opacity", project_path, opacity)

    def set_column_opacity(self, project_path: str, opacity: float) -> None:
        self._record("set_column_opacity", project_path, opacity)

    def set_column_border_enabled(self, project_path: str, enabled: bool) -> None:
        self._record("set_column_border_enabled", project_path, enabled)

    def set_card_glassmorphism(self, project_path: str, enabled: bool) -> None:
        self._record("set_card_glassmorphism", project_path, enabled)

    def set_card_border_enabled(self, project_path: str, enabled: bool) -> None:
        self._record("set_card_border_enabled", project_path, enabled)

    def set_card_border_opacity(self, project_path: str, opacity: float) -> None:
        self._record("set_card_border_opacity", project_path, opacity)

    def set_hide_scrollbar(self, project_path: str, hide: bool) -> None:
        self._record("set_hide_scrollbar", project_path, hide)

    def names_for(self, project_path: str) -> list[str]:
        """Names of the setters called for *project_path*, in call order."""
        return [name for name, path, _ in self.calls if path == project_path]


def create_mock_settings_client(
    backgrounds: Mapping[str, Mapping[str, Any] | None] | None = None,
) -> MockSettingsClient:
    """Create and return a mock settings client for testing."""
    return MockSettingsClient(backgrounds)


def create_error_simulating_client(
    raise_for: list[str] | None = None,
    unavailable_for: list[str] | None = None,
) -> ErrorSimulatingSettingsClient:
    """Create a settings client that fails for the given projects."""
    return ErrorSimulatingSettingsClient(raise_for=raise_for, unavailable_for=unavailable_for)
