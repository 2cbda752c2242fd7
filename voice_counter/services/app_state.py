"""Process-wide state owned by the FastAPI app.

Created by the app lifespan and stored on ``app.state.counter``; route
handlers reach it through the ``get_state`` dependency instead of importing
module globals.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from fastapi import Request

from voice_counter.services.channel_title import ChannelTitleUpdater
from voice_counter.services.counter_store import CounterState, CounterStore

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    store: CounterStore
    updater: ChannelTitleUpdater
    counter: CounterState = field(default_factory=CounterState)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def execution_count(self) -> int:
        return self.counter.execution_count

    @property
    def bot_online(self) -> bool:
        return self.updater.online

    def load(self) -> None:
        self.counter = self.store.load()

    async def record_execution(self) -> int:
        """Increment the counter, update the channel title and persist.

        The increment is kept and saved even when the title update fails;
        the RemoteServiceError still propagates to the caller.
        """
        async with self.lock:
            self.counter.execution_count += 1
            count = self.counter.execution_count
            logger.info("Execution recorded - Total: %d", count)
            try:
                await self.updater.publish(count)
            finally:
                self.store.save(self.counter)
        return count

    async def shutdown(self) -> None:
        logger.info("Shutting down...")
        await self.updater.close()


def get_state(request: Request) -> AppState:
    return request.app.state.counter
