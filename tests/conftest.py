"""Shared fixtures: an in-process Discord fake and an app wired to it."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from voice_counter.main import create_app
from voice_counter.services.app_state import AppState
from voice_counter.services.channel_title import ChannelTitleUpdater
from voice_counter.services.counter_store import CounterStore

CHANNEL_ID = "123456789012345678"


class FakeDiscordClient:
    """Records calls instead of talking to Discord."""

    def __init__(self) -> None:
        self.logins = 0
        self.logouts = 0
        self.renames: list[tuple[str, str]] = []
        self.login_error: Exception | None = None
        self.rename_error: Exception | None = None
        self.logged_in = False

    def login(self) -> str:
        if self.login_error is not None:
            raise self.login_error
        self.logins += 1
        self.logged_in = True
        return "CounterBot#0001"

    def logout(self) -> None:
        self.logouts += 1
        self.logged_in = False

    def rename_channel(self, channel_id: str, name: str) -> dict:
        if self.rename_error is not None:
            raise self.rename_error
        self.renames.append((channel_id, name))
        return {"id": channel_id, "name": name}


@pytest.fixture
def discord() -> FakeDiscordClient:
    return FakeDiscordClient()


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "counter.json"


@pytest.fixture
def updater(discord) -> ChannelTitleUpdater:
    return ChannelTitleUpdater(discord, CHANNEL_ID)


@pytest.fixture
def state(updater, data_file) -> AppState:
    return AppState(store=CounterStore(data_file), updater=updater)


@pytest.fixture
def client(state):
    with TestClient(create_app(state=state)) as test_client:
        yield test_client
