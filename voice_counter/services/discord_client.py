"""
Discord REST client used by the channel title updater.

A "login" validates the bot token against ``GET /users/@me`` and keeps an
authenticated ``requests.Session`` open until ``logout``.  Channel renames go
through ``PATCH /channels/{id}``.  All calls are blocking; callers on the event
loop run them in an executor.
"""
from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://discord.com/api/v10"


class DiscordClient:
    """Minimal bot-token client for the Discord REST API."""

    def __init__(
        self,
        token: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
    ) -> None:
        if not token:
            raise ValueError("DISCORD_BOT_TOKEN is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._session: requests.Session | None = None

    @property
    def logged_in(self) -> bool:
        return self._session is not None

    def login(self) -> str:
        """Open an authenticated session and return the bot's tag."""
        session = requests.Session()
        session.headers.update({
            "Authorization": f"Bot {self._token}",
            "Content-Type": "application/json",
        })
        try:
            resp = session.get(f"{self._api_base}/users/@me", timeout=self._timeout)
            resp.raise_for_status()
            user = resp.json()
            if not isinstance(user, dict):
                raise ValueError(f"Unexpected /users/@me payload: {user!r}")
        except (requests.RequestException, ValueError):
            session.close()
            raise

        self._session = session
        tag = user.get("username", "unknown")
        discriminator = user.get("discriminator")
        if discriminator and discriminator != "0":
            tag = f"{tag}#{discriminator}"
        logger.info("Bot logged in as %s", tag)
        return tag

    def logout(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def rename_channel(self, channel_id: str, name: str) -> dict:
        """Set the display name of ``channel_id``; returns the updated channel."""
        if self._session is None:
            raise RuntimeError("Discord client is not logged in.")

        resp = self._session.patch(
            f"{self._api_base}/channels/{channel_id}",
            json={"name": name},
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return resp.json()
