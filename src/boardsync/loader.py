# filepath: src/boardsync/loader.py
"""Loads a project's stored board appearance when the project is activated."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Final

from boardsync.guard import LoadGuard
from boardsync.protocols import BackgroundSetters, SettingsClient
from boardsync.remote.errors import SettingsAPIError
from boardsync.remote.models import BoardBackground, SettingsUnavailable
from boardsync.state.store import AppStore, ProjectActivated

logger: Final = logging.getLogger(__name__)

# Optional BoardBackground field -> silent setter on the shared state
FIELD_SETTERS: Final[dict[str, str]] = {
    "card_opacity": "set_card_opacity",
    "column_opacity": "set_column_opacity",
    "column_border_enabled": "set_column_border_enabled",
    "card_glassmorphism": "set_card_glassmorphism",
    "card_border_enabled": "set_card_border_enabled",
    "card_border_opacity": "set_card_border_opacity",
    "hide_scrollbar": "set_hide_scrollbar",
}


class ProjectSettingsLoader:
    """Keeps the shared board appearance in line with the settings service.

    Every time a project becomes active its stored settings are fetched
    once and the fields that are present are applied through silent
    setters, so nothing is saved back. Failures are logged and otherwise
    ignored; the board simply keeps its current appearance.

    Loads for different projects may overlap. Each one only ever writes to
    its own project's state, so a late answer for a project the user has
    already left does no harm.
    """

    def __init__(self, client: SettingsClient, setters: BackgroundSetters) -> None:
        """Initialize the loader.

        Args:
            client: Source of stored project settings
            setters: Silent setters of the shared state
        """
        self.client = client
        self.setters = setters
        self.guard = LoadGuard()
        self._tasks: set[asyncio.Task[bool]] = set()
        self._unsubscribe: Callable[[], None] | None = None

    # ---- wiring ----
    def attach(self, store: AppStore) -> None:
        """Start reacting to project changes of *store*."""
        self.detach()
        self._unsubscribe = store.subscribe(self.handle_event)

    def detach(self) -> None:
        """Stop reacting to project changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_event(self, event: ProjectActivated) -> None:
        self.on_project_activated(event.project_path)

    # ---- trigger ----
    def on_project_activated(self, identity: str | None) -> asyncio.Task[bool] | None:
        """Start loading settings for a newly active project.

        Must be called from the event loop thread. Returns immediately;
        the fetch runs as a task.

        Args:
            identity: Path of the active project, or None/"" for no project

        Returns:
            The load task, or None when there is nothing to load
        """
        if not identity:
            return None

        loop = asyncio.get_running_loop()

        if not self.guard.check_and_mark(identity):
            logger.debug("Settings for %s already loading or loaded", identity)
            return None

        task = loop.create_task(self.load(identity), name=f"load-settings:{identity}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every started load has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    @property
    def pending(self) -> int:
        """Number of loads still in flight."""
        return len(self._tasks)

    # ---- load ----
    async def load(self, identity: str) -> bool:
        """Fetch and apply the settings of one project.

        Args:
            identity: Project to load

        Returns:
            True if a board background was applied
        """
        try:
            result = await self.client.get_project(identity)
        except SettingsAPIError as err:
            logger.warning("Failed to load project settings for %s: %s", identity, err)
            return False
        except Exception:
            logger.exception("Failed to load project settings for %s", identity)
            return False

        if isinstance(result, SettingsUnavailable):
            logger.warning("Failed to load project settings for %s: %s", identity, result.reason)
            return False

        if result.board_background is None:
            logger.debug("No board background stored for %s", identity)
            return False

        try:
            applied = self.apply_background(identity, result.board_background)
        except Exception:
            logger.exception("Failed to apply project settings for %s", identity)
            return False

        logger.info("Loaded board background for %s (%s)", identity, ", ".join(applied))
        return True

    def apply_background(self, identity: str, background: BoardBackground) -> list[str]:
        """Apply *background* to the state of *identity*.

        ``image_path`` is always applied; optional fields only when present.
        All setters are looked up before the first one is called. Fields are
        independent, so if a setter raises, the fields applied before it
        stay applied and the rest are skipped.

        Returns:
            Names of the setters that were called
        """
        calls: list[tuple[str, Callable[[str, object], None], object]] = [
            ("set_board_background", self.setters.set_board_background, background.image_path)
        ]
        for field_name, value in background.present_fields().items():
            setter_name = FIELD_SETTERS[field_name]
            calls.append((setter_name, getattr(self.setters, setter_name), value))

        applied: list[str] = []
        for setter_name, setter, value in calls:
            setter(identity, value)
            applied.append(setter_name)
        return applied
