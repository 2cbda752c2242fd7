import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from voice_counter.config import Settings, get_settings
from voice_counter.errors import (
    ConfigurationError,
    PersistenceError,
    RemoteServiceError,
    ValidationError,
)
from voice_counter.routes.execute import router as execute_router
from voice_counter.routes.status import router as status_router
from voice_counter.services.app_state import AppState
from voice_counter.services.channel_title import ChannelTitleUpdater
from voice_counter.services.counter_store import CounterStore
from voice_counter.services.discord_client import DiscordClient

logger = logging.getLogger(__name__)


def build_state(settings: Settings) -> AppState:
    """Wire the store, Discord client and updater from ``settings``."""
    settings.require()
    client = DiscordClient(
        settings.discord_bot_token,
        api_base=settings.discord_api_base,
        timeout=settings.request_timeout_seconds,
    )
    updater = ChannelTitleUpdater(
        client,
        settings.voice_channel_id,
        idle_seconds=settings.session_idle_seconds,
        template=settings.title_template,
    )
    return AppState(store=CounterStore(settings.data_file), updater=updater)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(settings: Settings | None = None, state: AppState | None = None) -> FastAPI:
    if state is None:
        state = build_state(settings or get_settings())

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        state.load()
        logger.info("Voice channel ID: %s", state.updater.channel_id)
        logger.info("Current execution count: %d", state.execution_count)
        try:
            yield
        finally:
            await state.shutdown()

    application = FastAPI(
        title="Voice Counter",
        version="0.1.0",
        description="Counts executions and mirrors the total in a Discord voice channel name.",
        lifespan=lifespan,
    )
    application.state.counter = state

    @application.exception_handler(ValidationError)
    async def on_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, str(exc))

    @application.exception_handler(RequestValidationError)
    async def on_bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, "Missing required fields (name, username, stats)")

    @application.exception_handler(RemoteServiceError)
    @application.exception_handler(PersistenceError)
    async def on_service_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Error processing execution: %s", exc)
        return _error(500, str(exc))

    application.include_router(execute_router)
    application.include_router(status_router)

    return application


def main() -> None:
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    try:
        application = create_app(settings)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    logger.info("Server running on port %d", settings.port)
    uvicorn.run(application, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
