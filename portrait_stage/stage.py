"""Stage — the lifecycle surface a chat host drives.

The host calls, in order:

    load()              once per session; returns the initial state
    set_state(state)    whenever it restores or stores state
    before_prompt(msg)  before the model replies (no-op here)
    after_response(msg) after each message; detects speakers + balance
    view_model()        whenever the panel repaints

Config is resolved into a StageConfig once, at construction. The state held
here is only what the host last handed over; the turn logic itself lives in
the pure reducer.
"""

from __future__ import annotations

import logging
from typing import Any

from portrait_stage.models import (
    DEFAULT_INITIAL_SPEAKERS,
    IncomingMessage,
    LoadResult,
    StageConfig,
    TurnState,
    ViewModel,
)
from portrait_stage.reducer import process_turn
from portrait_stage.roster import resolve_names, resolve_roster

logger = logging.getLogger(__name__)


def initial_state(config: StageConfig) -> TurnState:
    """State for a fresh session: configured initial speakers, no balance."""
    names = config.initial_speakers or list(DEFAULT_INITIAL_SPEAKERS)
    speakers = resolve_names(names, resolve_roster(config))
    return TurnState(last_speakers=[s.model_copy(deep=True) for s in speakers])


class Stage:
    """Speaker-portrait stage for one chat session.

    Args:
        config:   Host configuration as a dict (camelCase or snake_case keys)
                  or an already-built StageConfig. None means all defaults.
        state:    Previously persisted state, if the host is resuming.
        bot_name: The host bot's display name, the last fallback author name.
    """

    def __init__(
        self,
        config: StageConfig | dict[str, Any] | None = None,
        state: TurnState | dict[str, Any] | None = None,
        bot_name: str = "",
    ) -> None:
        if isinstance(config, StageConfig):
            self.config = config
        else:
            self.config = StageConfig.model_validate(config or {})
        self.bot_name = bot_name
        self.state: TurnState | None = (
            TurnState.model_validate(state) if isinstance(state, dict) else state
        )

    async def load(self) -> LoadResult:
        state = initial_state(self.config)
        self.state = state
        logger.debug(
            "Stage loaded: %d roster entities, initial speakers %s",
            len(resolve_roster(self.config)), [s.name for s in state.last_speakers],
        )
        return LoadResult(success=True, ui={"visible": self.config.show_panel}, state=state)

    async def set_state(self, state: TurnState) -> None:
        self.state = state

    async def before_prompt(self, message: IncomingMessage | dict[str, Any]) -> dict:
        return {}

    async def after_response(self, message: IncomingMessage | dict[str, Any]) -> dict:
        """Detect speakers and balance in ``message`` and store the new state."""
        if not isinstance(message, IncomingMessage):
            message = IncomingMessage.model_validate(message if isinstance(message, dict) else {})
        next_state = process_turn(
            message, self.config, self.state or TurnState(), bot_name=self.bot_name,
        )
        if next_state is not None:
            await self.set_state(next_state)
        return {}

    def view_model(self) -> ViewModel:
        state = self.state or TurnState()
        return ViewModel(
            speakers=state.last_speakers,
            balance=state.balance,
            hidden=not self.config.show_panel,
            show_balance=self.config.show_balance,
            currency_label=self.config.currency_label,
        )
