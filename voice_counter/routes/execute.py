"""
Execution endpoint:

  POST /execute
    Accepts { name, username, stats } JSON body.
    Increments the execution counter, renames the voice channel and
    persists the new count before answering.
"""
import logging
import math

from fastapi import APIRouter, Depends

from voice_counter.errors import ValidationError
from voice_counter.schemas.response import (
    ErrorResponse,
    ExecuteRequest,
    ExecuteResponse,
    Player,
)
from voice_counter.services.app_state import AppState, get_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["execute"])

REQUIRED_FIELDS = ("name", "username", "stats")


def _missing(value) -> bool:
    """Falsy scalars count as missing; empty lists and objects do not."""
    if value is None or value == "":
        return True
    if isinstance(value, (int, float)):
        return value == 0 or math.isnan(value)
    return False


@router.post(
    "/execute",
    response_model=ExecuteResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def execute(
    body: ExecuteRequest,
    state: AppState = Depends(get_state),
) -> ExecuteResponse:
    """Record one execution and return the new total."""
    if any(_missing(getattr(body, f)) for f in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields (name, username, stats)")

    logger.info("Execution by %s (%s)", body.name, body.username)
    # RemoteServiceError / PersistenceError are turned into 500s by the app
    count = await state.record_execution()

    return ExecuteResponse(
        execution_count=count,
        player=Player(name=body.name, username=body.username, stats=body.stats),
    )
