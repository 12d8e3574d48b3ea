"""Tests for ProjectSettingsLoader.

These tests verify that:
1. A project is fetched once per activation, and again after switching back
2. Only the fields present in the payload are applied
3. Fetch failures are logged and never reach the caller
4. Overlapping loads each write to their own project
"""

from __future__ import annotations

import asyncio
import logging

import pytest

from boardsync.loader import FIELD_SETTERS, ProjectSettingsLoader
from boardsync.protocols import (
    ErrorSimulatingSettingsClient,
    MockSettingsClient,
    RecordingSetters,
)
from boardsync.remote.models import BoardBackground
from boardsync.state import AppStore, Project

ALPHA = "/projects/alpha"
BETA = "/projects/beta"


def run_activations(loader: ProjectSettingsLoader, *identities: str | None) -> None:
    """Activate *identities* back to back on a fresh loop and wait for the loads."""

    async def scenario() -> None:
        for identity in identities:
            loader.on_project_activated(identity)
        await loader.wait_idle()

    asyncio.run(scenario())


# ── deduplication ──────────────────────────────────────────────────────────
def test_duplicate_activation_fetches_once(
    client: MockSettingsClient, setters: RecordingSetters
) -> None:
    loader = ProjectSettingsLoader(client, setters)
    run_activations(loader, ALPHA, ALPHA)
    assert client.calls == [ALPHA]


def test_duplicate_activation_while_fetch_in_flight(
    client: MockSettingsClient, setters: RecordingSetters
) -> None:
    loader = ProjectSettingsLoader(client, setters)

    async def scenario() -> None:
        gate = client.gate(ALPHA)
        first = loader.on_project_activated(ALPHA)
        await asyncio.sleep(0)
        second = loader.on_project_activated(ALPHA)
        assert first is not None
        assert second is None
        assert loader.pending == 1
        gate.set()
        await loader.wait_idle()

    asyncio.run(scenario())
    assert client.calls == [ALPHA]
    assert setters.names_for(ALPHA) == ["set_board_background", "set_card_opacity"]


def test_revisiting_project_fetches_again(
    client: MockSettingsClient, setters: RecordingSetters
) -> None:
    loader = ProjectSettingsLoader(client, setters)
    run_activations(loader, ALPHA, BETA, ALPHA)
    assert client.calls == [ALPHA, BETA, ALPHA]


@pytest.mark.parametrize("identity", [None, ""])
def test_no_active_project_is_noop(
    client: MockSettingsClient, setters: RecordingSetters, identity: str | None
) -> None:
    loader = ProjectSettingsLoader(client, setters)

    async def scenario() -> None:
        assert loader.on_project_activated(identity) is None

    asyncio.run(scenario())
    assert client.calls == []
    assert setters.calls == []
    assert loader.guard.current is None


# ── selective apply ────────────────────────────────────────────────────────
def test_partial_payload_applies_present_fields_only(
    client: MockSettingsClient, setters: RecordingSetters
) -> None:
    loader = ProjectSettingsLoader(client, setters)
    run_activations(loader, ALPHA)
    assert setters.calls == [
        ("set_board_background", ALPHA, "bg.png"),
        ("set_card_opacity", ALPHA, 0.5),
    ]


def test_full_payload_applies_every_field(
    client: MockSettingsClient, setters: RecordingSetters
) -> None:
    loader = ProjectSettingsLoader(client, setters)
    run_activations(loader, BETA)
    names = setters.names_for(BETA)
    assert names[0] == "set_board_background"
    assert sorted(names[1:]) == sorted(FIELD_SETTERS.values())


def test_background_without_image_path_clears_image(setters: RecordingSetters) -> None:
    client = MockSettingsClient({ALPHA: {"hideScrollbar": True}})
    loader = ProjectSettingsLoader(client, setters)
    run_activations(loader, ALPHA)
    assert setters.calls == [
        ("set_board_background", ALPHA, None),
        ("set_hide_scrollbar", ALPHA, True),
    ]


def test_no_background_stored_is_noop(setters: RecordingSetters) -> None:
    client = MockSettingsClient({ALPHA: None})
    loader = ProjectSettingsLoader(client, setters)
    run_activations(loader, ALPHA)
    assert client.calls == [ALPHA]
    assert setters.calls == []


def test_malformed_fields_are_skipped(setters: RecordingSetters) -> None:
    client = MockSettingsClient(
        {ALPHA: {"imagePath": "bg.png", "cardOpacity": "very", "columnOpacity": None}}
    )
    loader = ProjectSettingsLoader(client, setters)
    run_activations(loader, ALPHA)
    assert setters.names_for(ALPHA) == ["set_board_background"]


def test_apply_background_returns_called_setters(setters: RecordingSetters) -> None:
    loader = ProjectSettingsLoader(MockSettingsClient(), setters)
    bg = BoardBackground(image_path="x.png", column_border_enabled=False)
    assert loader.apply_background(ALPHA, bg) == [
        "set_board_background",
        "set_column_border_enabled",
    ]


# ── failure isolation ──────────────────────────────────────────────────────
def test_service_failure_applies_nothing(
    setters: RecordingSetters, caplog: pytest.LogCaptureFixture
) -> None:
    client = ErrorSimulatingSettingsClient(unavailable_for=[ALPHA])
    loader = ProjectSettingsLoader(client, setters)

    with caplog.at_level(logging.WARNING, logger="boardsync.loader"):
        run_activations(loader, ALPHA)

    assert client.calls == [ALPHA]
    assert setters.calls == []
    assert "Failed to load project settings" in caplog.text


def test_raised_error_is_swallowed_and_next_project_loads(
    setters: RecordingSetters,
) -> None:
    client = ErrorSimulatingSettingsClient(
        backgrounds={BETA: {"imagePath": "beta.jpg"}}, raise_for=[ALPHA]
    )
    loader = ProjectSettingsLoader(client, setters)
    run_activations(loader, ALPHA, BETA)

    assert client.calls == [ALPHA, BETA]
    assert setters.calls == [("set_board_background", BETA, "beta.jpg")]
    assert loader.guard.current == BETA


def test_unexpected_exception_is_swallowed(setters: RecordingSetters) -> None:
    class BrokenClient:
        async def get_project(self, project_path: str):
            raise RuntimeError("boom")

    loader = ProjectSettingsLoader(BrokenClient(), setters)

    async def scenario() -> bool:
        task = loader.on_project_activated(ALPHA)
        assert task is not None
        return await task

    assert asyncio.run(scenario()) is False
    assert setters.calls == []


def test_failing_setter_does_not_escape(client: MockSettingsClient) -> None:
    class BrokenSetters(RecordingSetters):
        def set_card_opacity(self, project_path: str, opacity: float) -> None:
            raise ValueError("opacity out of range")

    setters = BrokenSetters()
    loader = ProjectSettingsLoader(client, setters)
    assert asyncio.run(loader.load(ALPHA)) is False
    assert setters.names_for(ALPHA) == ["set_board_background"]


def test_missing_setter_applies_nothing(client: MockSettingsClient) -> None:
    class NoOpacitySetters(RecordingSetters):
        def __getattribute__(self, name: str):
            if name == "set_card_opacity":
                raise AttributeError(name)
            return super().__getattribute__(name)

    setters = NoOpacitySetters()
    loader = ProjectSettingsLoader(client, setters)
    assert asyncio.run(loader.load(ALPHA)) is False
    assert setters.calls == []


# ── concurrency ────────────────────────────────────────────────────────────
def test_overlapping_loads_apply_to_own_project(
    client: MockSettingsClient, setters: RecordingSetters
) -> None:
    loader = ProjectSettingsLoader(client, setters)

    async def scenario() -> None:
        alpha_gate = client.gate(ALPHA)
        loader.on_project_activated(ALPHA)
        loader.on_project_activated(BETA)
        # beta resolves first, alpha afterwards
        while len(setters.names_for(BETA)) < 8:
            await asyncio.sleep(0)
        assert setters.names_for(ALPHA) == []
        alpha_gate.set()
        await loader.wait_idle()

    asyncio.run(scenario())
    assert ("set_board_background", ALPHA, "bg.png") in setters.calls
    assert ("set_board_background", BETA, "beta.jpg") in setters.calls
    assert ("set_card_opacity", ALPHA, 0.5) in setters.calls
    assert ("set_card_opacity", BETA, 80) in setters.calls


def test_trigger_requires_running_loop(
    client: MockSettingsClient, setters: RecordingSetters
) -> None:
    loader = ProjectSettingsLoader(client, setters)
    with pytest.raises(RuntimeError):
        loader.on_project_activated(ALPHA)
    # guard untouched, so the next activation still loads
    assert loader.guard.current is None


# ── store wiring ───────────────────────────────────────────────────────────
def test_attached_loader_follows_store(client: MockSettingsClient) -> None:
    store = AppStore()
    loader = ProjectSettingsLoader(client, store)
    loader.attach(store)

    async def scenario() -> None:
        store.set_current_project(Project(ALPHA))
        store.set_current_project(Project(ALPHA, name="renamed"))
        store.set_current_project(None)
        store.set_current_project(Project(BETA))
        await loader.wait_idle()

    asyncio.run(scenario())
    assert client.calls == [ALPHA, BETA]

    alpha = store.get_board_background(ALPHA)
    assert alpha.image_path == "bg.png"
    assert alpha.card_opacity == 0.5
    assert alpha.column_opacity == 100  # untouched default

    beta = store.get_board_background(BETA)
    assert beta.hide_scrollbar is True
    assert beta.card_border_opacity == 40


def test_switch_outside_loop_still_notifies_other_listeners(
    client: MockSettingsClient,
) -> None:
    store = AppStore()
    loader = ProjectSettingsLoader(client, store)
    loader.attach(store)
    seen: list[str | None] = []
    store.subscribe(lambda event: seen.append(event.project_path))

    with pytest.raises(RuntimeError):
        store.set_current_project(Project(ALPHA))

    assert seen == [ALPHA]
    assert store.current_project == Project(ALPHA)
    assert loader.guard.current is None


def test_detached_loader_ignores_store(client: MockSettingsClient) -> None:
    store = AppStore()
    loader = ProjectSettingsLoader(client, store)
    loader.attach(store)
    loader.detach()

    async def scenario() -> None:
        store.set_current_project(Project(ALPHA))
        await loader.wait_idle()

    asyncio.run(scenario())
    assert client.calls == []
