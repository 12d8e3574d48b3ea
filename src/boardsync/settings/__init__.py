"""Application settings management.

This package provides:
- UserSettings: User-configurable settings loaded from a YAML config file
"""

from boardsync.settings.user import UserSettings

__all__ = ["UserSettings"]
