"""Typed models for settings service responses.

Only the board background part of the project settings is modelled; other
keys are kept as extras.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from pydantic import field_validator

from boardsync.models.base import CamelModel

# ─────────────────────────── board background ────────────────────────────────


class BoardBackground(CamelModel):
    """Persisted appearance of a project's board.

    ``image_path`` is applied whenever the background object exists. The
    other fields are optional and independent; a field that was not sent
    means "leave the current value alone".
    """

    OPTIONAL_FIELDS: ClassVar[tuple[str, ...]] = (
        "card_opacity",
        "column_opacity",
        "column_border_enabled",
        "card_glassmorphism",
        "card_border_enabled",
        "card_border_opacity",
        "hide_scrollbar",
    )

    image_path: str | None = None
    card_opacity: float | None = None
    column_opacity: float | None = None
    column_border_enabled: bool | None = None
    card_glassmorphism: bool | None = None
    card_border_enabled: bool | None = None
    card_border_opacity: float | None = None
    hide_scrollbar: bool | None = None

    def present_fields(self) -> dict[str, Any]:
        """Return the optional fields that were actually sent.

        Returns:
            Mapping of attribute name to value, excluding ``image_path``
        """
        return {
            name: getattr(self, name)
            for name in self.OPTIONAL_FIELDS
            if name in self.model_fields_set and getattr(self, name) is not None
        }


# ─────────────────────────── envelope ────────────────────────────────────────


class ProjectSettings(CamelModel):
    """Settings stored for a single project."""

    board_background: BoardBackground | None = None

    @field_validator("board_background", mode="before")
    @classmethod
    def validate_board_background(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return BoardBackground.from_lenient(v)
        if isinstance(v, BoardBackground):
            return v
        return None


class ProjectSettingsResponse(CamelModel):
    """Response envelope of the project settings endpoint."""

    success: bool = False
    settings: ProjectSettings | None = None
    error: str | None = None

    @field_validator("settings", mode="before")
    @classmethod
    def validate_settings(cls, v: Any) -> Any:
        if isinstance(v, (dict, ProjectSettings)):
            return v
        return None

    def to_result(self) -> FetchResult:
        """Convert the envelope into a FetchResult.

        Returns:
            SettingsLoaded on success, SettingsUnavailable otherwise
        """
        if not self.success:
            return SettingsUnavailable(self.error or "settings service reported failure")
        background = self.settings.board_background if self.settings else None
        return SettingsLoaded(background)


# ─────────────────────────── fetch result ────────────────────────────────────


@dataclass(frozen=True)
class SettingsLoaded:
    """The service answered; ``board_background`` is None when nothing is stored."""

    board_background: BoardBackground | None = None


@dataclass(frozen=True)
class SettingsUnavailable:
    """The service answered with a failure."""

    reason: str


FetchResult = Union[SettingsLoaded, SettingsUnavailable]
