"""Unit tests for UI session management."""

import asyncio
from datetime import timedelta

import pytest

from src.modules.actions import Action
from src.modules.session_manager import SessionManager


def test_get_or_create_reuses_sessions():
    manager = SessionManager()

    created = manager.get_or_create()
    again = manager.get_or_create(created.id)

    assert again is created
    assert manager.get(created.id) is created
    assert manager.get(None) is None


def test_unknown_session_id_is_adopted():
    manager = SessionManager()

    ui_session = manager.get_or_create("abc123")

    assert ui_session.id == "abc123"
    assert manager.get("abc123") is ui_session


def test_sessions_have_separate_trackers():
    manager = SessionManager()

    assert manager.get_or_create().tracker is not manager.get_or_create().tracker


@pytest.mark.asyncio
async def test_end_waits_for_in_flight_submissions():
    manager = SessionManager()
    ui_session = manager.get_or_create()
    finished = []

    async def slow(value):
        await asyncio.sleep(0.01)
        finished.append(value)

    ui_session.tracker.submit(Action(slow, "slow"), 1)
    await manager.end(ui_session.id)

    assert finished == [1]
    assert ui_session.ended_at is not None
    assert manager.get(ui_session.id) is None


def test_evict_idle_drops_only_quiet_sessions():
    manager = SessionManager(idle_ttl=60)
    stale = manager.get_or_create()
    fresh = manager.get_or_create()
    stale.last_seen -= timedelta(seconds=120)

    assert manager.evict_idle() == 1
    assert manager.get(stale.id) is None
    assert stale.ended_at is not None
    assert manager.get(fresh.id) is fresh


@pytest.mark.asyncio
async def test_evict_idle_keeps_sessions_with_pending_submissions():
    manager = SessionManager(idle_ttl=60)
    ui_session = manager.get_or_create()
    release = asyncio.Event()

    async def blocked():
        await release.wait()

    ui_session.tracker.submit(Action(blocked, "blocked"))
    ui_session.last_seen -= timedelta(seconds=120)

    assert manager.evict_idle() == 0
    assert ui_session.id in manager.sessions

    release.set()
    await ui_session.tracker.wait_settled()
    assert manager.evict_idle() == 1
    assert ui_session.id not in manager.sessions


def test_creating_a_session_evicts_idle_ones():
    manager = SessionManager(idle_ttl=60)
    old = manager.get_or_create()
    old.last_seen -= timedelta(seconds=61)

    manager.get_or_create()

    assert old.id not in manager.sessions
    assert len(manager.sessions) == 1


def test_get_refreshes_last_seen():
    manager = SessionManager(idle_ttl=60)
    ui_session = manager.get_or_create()
    ui_session.last_seen -= timedelta(seconds=120)

    manager.get(ui_session.id)

    assert manager.evict_idle() == 0
