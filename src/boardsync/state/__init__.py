"""Shared application state."""

from boardsync.state.store import (
    AppStore,
    BoardBackgroundState,
    Project,
    ProjectActivated,
    ProjectListener,
)

__all__ = [
    "AppStore",
    "BoardBackgroundState",
    "Project",
    "ProjectActivated",
    "ProjectListener",
]
