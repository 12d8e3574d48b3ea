"""Per-project board settings synchronization."""

__version__ = "0.1.0"

from boardsync.guard import LoadGuard
from boardsync.loader import ProjectSettingsLoader
from boardsync.state import AppStore, Project, ProjectActivated

__all__ = [
    "AppStore",
    "LoadGuard",
    "Project",
    "ProjectActivated",
    "ProjectSettingsLoader",
]
