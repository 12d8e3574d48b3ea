"""Deduplication of project settings loads."""

from __future__ import annotations


class LoadGuard:
    """Remembers the project whose settings load was started last.

    The slot starts empty and is only ever overwritten. It is meant to be
    used from the event loop thread; there is no locking.
    """

    def __init__(self) -> None:
        self._current: str | None = None

    @property
    def current(self) -> str | None:
        """Identity of the last project a load was started for."""
        return self._current

    def check_and_mark(self, identity: str) -> bool:
        """Record *identity* and return True unless it is already recorded.

        Args:
            identity: Project identity about to be loaded

        Returns:
            True if the caller should load, False if the load is a duplicate
        """
        if self._current == identity:
            return False
        self._current = identity
        return True
