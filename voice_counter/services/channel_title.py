"""
Voice channel title updater.

Keeps the Discord bot online only while it is needed: the first publish logs
in, every publish renames the channel, and the session is closed again once
it has been idle for ``idle_seconds``.  Only one teardown timer is ever
pending; a new publish cancels the previous one.
"""
from __future__ import annotations

import asyncio
import logging

import requests

from voice_counter.errors import RemoteServiceError
from voice_counter.services.discord_client import DiscordClient

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "[👑] Executions | {count}"
DEFAULT_IDLE_SECONDS = 30.0


def _describe(exc: Exception) -> str:
    """Prefer the API's error body over the generic HTTP message."""
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return str(response.json())
        except ValueError:
            if response.text:
                return response.text
    return str(exc)


class ChannelTitleUpdater:
    """Reflects the execution count in a voice channel's name."""

    def __init__(
        self,
        client: DiscordClient,
        channel_id: str,
        idle_seconds: float = DEFAULT_IDLE_SECONDS,
        template: str = DEFAULT_TEMPLATE,
    ) -> None:
        self._client = client
        self._channel_id = channel_id
        self._idle_seconds = idle_seconds
        self._template = template
        self._online = False
        self._teardown_handle: asyncio.TimerHandle | None = None

    @property
    def online(self) -> bool:
        return self._online

    @property
    def channel_id(self) -> str:
        return self._channel_id

    def format_title(self, count: int) -> str:
        return self._template.format(count=count)

    async def publish(self, count: int) -> str:
        """Rename the channel for ``count`` and return the new title.

        Raises RemoteServiceError if the login or the rename fails.
        """
        loop = asyncio.get_running_loop()
        title = self.format_title(count)

        # An in-flight rename must not race the idle teardown
        self._cancel_teardown()

        if not self._online:
            try:
                tag = await loop.run_in_executor(None, self._client.login)
            except (requests.RequestException, ValueError) as exc:
                detail = _describe(exc)
                logger.error("Failed to log in to Discord: %s", detail)
                raise RemoteServiceError(f"Discord login failed: {detail}") from exc
            self._online = True
            logger.info("🟢 Bot is now online as %s", tag)

        try:
            await loop.run_in_executor(
                None, self._client.rename_channel, self._channel_id, title,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.error("Connection to Discord lost: %s", exc)
            self._go_offline()
            raise RemoteServiceError(f"Failed to update voice channel: {exc}") from exc
        except requests.RequestException as exc:
            detail = _describe(exc)
            logger.error("Failed to update voice channel: %s", detail)
            self._schedule_teardown(loop)
            raise RemoteServiceError(f"Failed to update voice channel: {detail}") from exc

        logger.info("Voice channel updated: %s", title)
        self._schedule_teardown(loop)
        return title

    async def close(self) -> None:
        """Cancel any pending teardown and log out right away."""
        self._cancel_teardown()
        if self._online:
            self._go_offline()

    def _schedule_teardown(self, loop: asyncio.AbstractEventLoop) -> None:
        self._cancel_teardown()
        self._teardown_handle = loop.call_later(self._idle_seconds, self._teardown)

    def _cancel_teardown(self) -> None:
        if self._teardown_handle is not None:
            self._teardown_handle.cancel()
            self._teardown_handle = None

    def _teardown(self) -> None:
        self._teardown_handle = None
        if self._online:
            self._go_offline()

    def _go_offline(self) -> None:
        self._client.logout()
        self._online = False
        logger.info("🔴 Bot went offline")
