"""Health check and built-in roster endpoints."""

from fastapi import APIRouter

from portrait_stage.balance import DEFAULT_BALANCE_PATTERN
from portrait_stage.models import DEFAULT_MAX_PER_TURN
from portrait_stage.roster import DEFAULT_ROSTER

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/roster/default")
async def default_roster():
    """The roster used when a session config brings none."""
    return [e.model_dump(by_alias=True) for e in DEFAULT_ROSTER]


@router.get("/defaults")
async def defaults():
    """Default stage settings, for hosts building a config form."""
    return {
        "maxPerTurn": DEFAULT_MAX_PER_TURN,
        "balanceRegex": DEFAULT_BALANCE_PATTERN,
    }
