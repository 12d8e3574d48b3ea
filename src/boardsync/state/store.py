"""Shared client state: the active project and per-project board appearance."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Final

logger: Final = logging.getLogger(__name__)


@dataclass(frozen=True)
class Project:
    """A project the user can open; ``path`` is its identity."""

    path: str
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", PurePath(self.path).name or self.path)


@dataclass(frozen=True)
class ProjectActivated:
    """Emitted when the active project changes; ``project_path`` is None when closed."""

    project_path: str | None


@dataclass
class BoardBackgroundState:
    """Board appearance currently shown for one project."""

    image_path: str | None = None
    card_opacity: float = 100
    column_opacity: float = 100
    column_border_enabled: bool = True
    card_glassmorphism: bool = True
    card_border_enabled: bool = True
    card_border_opacity: float = 100
    hide_scrollbar: bool = False


ProjectListener = Callable[[ProjectActivated], None]


@dataclass
class AppStore:
    """Mutable client state shared across the application.

    The ``set_*`` appearance setters are silent: they update this store
    only and never call the settings service.
    """

    _current_project: Project | None = None
    _backgrounds: dict[str, BoardBackgroundState] = field(default_factory=dict)
    _listeners: list[ProjectListener] = field(default_factory=list)

    # ---- project identity ----
    @property
    def current_project(self) -> Project | None:
        return self._current_project

    def set_current_project(self, project: Project | None) -> None:
        """Switch the active project and notify subscribers on change.

        Every listener is notified even if an earlier one raises; the first
        error is re-raised once all of them have run.

        Args:
            project: Project to activate, or None to close the current one
        """
        previous = self._current_project.path if self._current_project else None
        self._current_project = project
        current = project.path if project else None
        if current == previous:
            return
        logger.debug("Active project changed: %s -> %s", previous, current)
        event = ProjectActivated(current)
        first_error: Exception | None = None
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:
                logger.exception("Project listener %r failed for %s", listener, current)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def subscribe(self, listener: ProjectListener) -> Callable[[], None]:
        """Register *listener* for project changes.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- board appearance ----
    def get_board_background(self, project_path: str) -> BoardBackgroundState:
        """Return the appearance of *project_path*, with defaults if never set."""
        return self._backgrounds.get(project_path, BoardBackgroundState())

    def _background(self, project_path: str) -> BoardBackgroundState:
        return self._backgrounds.setdefault(project_path, BoardBackgroundState())

    def set_board_background(self, project_path: str, image_path: str | None) -> None:
        self._background(project_path).image_path = image_path

    def set_card_opacity(self, project_path: str, opacity: float) -> None:
        self._background(project_path).card_opacity = opacity

    def set_column_opacity(self, project_path: str, opacity: float) -> None:
        self._background(project_path).column_opacity = opacity

    def set_column_border_enabled(self, project_path: str, enabled: bool) -> None:
        self._background(project_path).column_border_enabled = enabled

    def set_card_glassmorphism(self, project_path: str, enabled: bool) -> None:
        self._background(project_path).card_glassmorphism = enabled

    def set_card_border_enabled(self, project_path: str, enabled: bool) -> None:
        self._background(project_path).card_border_enabled = enabled

    def set_card_border_opacity(self, project_path: str, opacity: float) -> None:
        self._background(project_path).card_border_opacity = opacity

    def set_hide_scrollbar(self, project_path: str, hide: bool) -> None:
        self._background(project_path).hide_scrollbar = hide
