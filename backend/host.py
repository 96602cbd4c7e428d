"""Host duties around the stage: build it from storage, persist what it returns.

The stage never touches disk. Each request rebuilds a Stage from the stored
config and state, drives one lifecycle call, and writes the resulting state
back.
"""

import logging

from portrait_stage.models import IncomingMessage, StageConfig, ViewModel
from portrait_stage.stage import Stage
from portrait_stage.storage import Storage

logger = logging.getLogger(__name__)


def load_stage(storage: Storage, session_id: str) -> Stage | None:
    """Rebuild the stage for a session, or None if the session does not exist."""
    meta = storage.get_session(session_id)
    if meta is None:
        return None
    return Stage(
        config=StageConfig.model_validate(meta.get("config", {})),
        state=storage.get_state(session_id),
        bot_name=meta.get("bot_name", ""),
    )


async def start_session(
    storage: Storage,
    session_id: str,
    config: StageConfig,
    title: str = "",
    bot_name: str = "",
) -> tuple[dict, Stage, bool]:
    """Create a session, run the stage's load hook and persist its initial state.

    Returns (session metadata, stage, ready flag).
    """
    meta = storage.create_session(session_id, config, title=title, bot_name=bot_name)
    stage = Stage(config=config, bot_name=bot_name)
    result = await stage.load()
    storage.save_state(meta["session_id"], result.state)
    logger.info(
        "Session %s started (ready=%s, initial speakers=%d)",
        meta["session_id"], result.success, len(result.state.last_speakers),
    )
    return meta, stage, result.success


async def deliver_message(
    storage: Storage, session_id: str, message: IncomingMessage
) -> ViewModel | None:
    """Feed one incoming message to the session's stage. None if no such session."""
    stage = load_stage(storage, session_id)
    if stage is None:
        return None
    storage.append_message(session_id, message)
    before = stage.state
    await stage.after_response(message)
    if stage.state is not None and stage.state is not before:
        storage.save_state(session_id, stage.state)
    else:
        logger.debug("Session %s: turn left state unchanged", session_id)
    return stage.view_model()
