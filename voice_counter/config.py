from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from voice_counter.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # ── Discord (required) ──────────────────────────────────────────────
    discord_bot_token: str = ""
    voice_channel_id: str = ""
    discord_api_base: str = "https://discord.com/api/v10"
    request_timeout_seconds: float = 10.0

    # ── Channel title ───────────────────────────────────────────────────
    title_template: str = "[👑] Executions | {count}"
    # Idle window before the bot session is closed again
    session_idle_seconds: float = 30.0

    # ── General ─────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000
    data_file: str = "counter.json"
    log_level: str = "INFO"

    def require(self) -> "Settings":
        """Raise ConfigurationError if a required value is missing."""
        if not self.discord_bot_token:
            raise ConfigurationError("Missing DISCORD_BOT_TOKEN environment variable")
        if not self.voice_channel_id:
            raise ConfigurationError("Missing VOICE_CHANNEL_ID environment variable")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
