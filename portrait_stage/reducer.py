"""Turn reducer — folds one incoming message into the session state.

Turn flow:
  1. Resolve the roster (host roster, else the built-in one).
  2. User-authored messages are a no-op: nothing changes, nothing persists.
  3. Resolve the message text (text → content → body).
  4. Scan the text for attribution lines.
  5. Nothing found and fallback-to-author enabled → look up the author name.
  6. Cap the speakers to the per-turn limit, keeping the earliest.
  7. Extract the balance when enabled; otherwise carry the previous one.
  8. Return the merged state. The caller persists it.

The reducer reads no ambient state: the previous state goes in, the next
state comes out.
"""

from __future__ import annotations

import logging

from portrait_stage.balance import extract_balance
from portrait_stage.models import IncomingMessage, StageConfig, TurnState
from portrait_stage.roster import build_alias_index, canonicalize, resolve_roster
from portrait_stage.scanner import scan_speakers

logger = logging.getLogger(__name__)


def process_turn(
    message: IncomingMessage,
    config: StageConfig,
    state: TurnState,
    *,
    bot_name: str = "",
) -> TurnState | None:
    """Return the state after ``message``, or None when the message is the user's own."""
    roster = resolve_roster(config)

    if message.is_from_user():
        logger.debug("User message ignored")
        return None

    text = message.resolve_text()
    speakers = scan_speakers(text, roster)

    if not speakers and config.fallback_to_author:
        author = message.resolve_author_name(bot_name)
        entity = build_alias_index(roster).get(canonicalize(author))
        if entity:
            logger.debug("No attribution lines; falling back to author %r", author)
            speakers = [entity]

    limit = config.turn_limit
    if len(speakers) > limit:
        logger.debug("Capping %d speakers to %d", len(speakers), limit)
        speakers = speakers[:limit]

    balance = state.balance
    if config.show_balance:
        balance = extract_balance(text, config.balance_regex, state.balance)
        if balance != state.balance:
            logger.debug("Balance %r -> %r", state.balance, balance)

    logger.debug("Speakers this turn: %s", [s.name for s in speakers])
    return state.model_copy(update={
        # never alias roster entities
        "last_speakers": [s.model_copy(deep=True) for s in speakers],
        "balance": balance,
    })
