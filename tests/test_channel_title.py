"""
Tests for the channel title updater: session lifecycle and teardown timer.
"""
import asyncio

import pytest
import requests

from voice_counter.errors import RemoteServiceError
from voice_counter.services.channel_title import ChannelTitleUpdater


def test_publish_logs_in_once_and_renames(discord, updater):
    async def scenario():
        assert updater.online is False
        assert await updater.publish(1) == "[👑] Executions | 1"
        assert await updater.publish(2) == "[👑] Executions | 2"
        await updater.close()

    asyncio.run(scenario())

    assert discord.logins == 1
    assert [name for _, name in discord.renames] == [
        "[👑] Executions | 1",
        "[👑] Executions | 2",
    ]


def test_teardown_is_scheduled_thirty_seconds_out(updater):
    async def scenario():
        loop = asyncio.get_running_loop()
        await updater.publish(1)
        handle = updater._teardown_handle
        assert handle is not None
        assert handle.when() - loop.time() == pytest.approx(30.0, abs=0.5)
        await updater.close()

    asyncio.run(scenario())


def test_session_goes_offline_after_idle_window(discord):
    updater = ChannelTitleUpdater(discord, "42", idle_seconds=0.05)

    async def scenario():
        await updater.publish(1)
        assert updater.online is True
        await asyncio.sleep(0.2)
        assert updater.online is False

    asyncio.run(scenario())

    assert discord.logouts == 1


def test_new_publish_cancels_pending_teardown(discord):
    updater = ChannelTitleUpdater(discord, "42", idle_seconds=0.3)

    async def scenario():
        await updater.publish(1)
        first = updater._teardown_handle
        await asyncio.sleep(0.2)
        await updater.publish(2)
        assert first.cancelled()
        # the first timer would have fired by now
        await asyncio.sleep(0.2)
        assert updater.online is True
        await asyncio.sleep(0.4)
        assert updater.online is False

    asyncio.run(scenario())

    assert discord.logins == 1
    assert discord.logouts == 1


def test_login_failure_leaves_session_inactive(discord, updater):
    discord.login_error = requests.HTTPError("401 Unauthorized")

    with pytest.raises(RemoteServiceError, match="login failed"):
        asyncio.run(updater.publish(1))

    assert updater.online is False
    assert discord.renames == []


def test_malformed_login_payload_is_a_remote_error(discord, updater):
    discord.login_error = ValueError("Unexpected /users/@me payload: []")

    with pytest.raises(RemoteServiceError, match="Unexpected"):
        asyncio.run(updater.publish(1))

    assert updater.online is False


def test_connection_error_forces_offline(discord, updater):
    async def scenario():
        await updater.publish(1)
        discord.rename_error = requests.ConnectionError("connection reset")
        with pytest.raises(RemoteServiceError, match="connection reset"):
            await updater.publish(2)
        assert updater.online is False
        assert updater._teardown_handle is None

        # next publish logs in again
        discord.rename_error = None
        await updater.publish(3)
        assert updater.online is True
        await updater.close()

    asyncio.run(scenario())

    assert discord.logins == 2


def test_api_error_keeps_session_and_schedules_teardown(discord, updater):
    async def scenario():
        discord.rename_error = requests.HTTPError("429 Too Many Requests")
        with pytest.raises(RemoteServiceError, match="429"):
            await updater.publish(1)
        assert updater.online is True
        assert updater._teardown_handle is not None
        await updater.close()

    asyncio.run(scenario())

    assert discord.renames == []


def test_close_without_session_is_a_noop(discord, updater):
    asyncio.run(updater.close())
    assert discord.logouts == 0


def test_custom_template(discord):
    updater = ChannelTitleUpdater(discord, "42", template="Runs: {count}")
    assert updater.format_title(7) == "Runs: 7"
