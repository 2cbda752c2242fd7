"""
Read-only endpoints:

  GET /counter
  GET /
"""
from fastapi import APIRouter, Depends

from voice_counter.schemas.response import CounterResponse, StatusResponse
from voice_counter.services.app_state import AppState, get_state

router = APIRouter(tags=["status"])


@router.get("/counter", response_model=CounterResponse)
def get_counter(state: AppState = Depends(get_state)) -> CounterResponse:
    return CounterResponse(execution_count=state.execution_count)


@router.get("/", response_model=StatusResponse)
def get_status(state: AppState = Depends(get_state)) -> StatusResponse:
    """Return the service marker, the count, the channel and the bot flag."""
    return StatusResponse(
        execution_count=state.execution_count,
        channel_id=state.updater.channel_id,
        bot_online=state.bot_online,
    )
