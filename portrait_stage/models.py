"""Core domain models.

Every stage entry point and storage function operates on these types.
Pydantic is used for validation and serialisation at every data boundary.

Host payloads arrive in camelCase (``imageUrl``, ``maxPerTurn``,
``lastSpeakers`` ...); snake_case field names are accepted as well.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from portrait_stage.balance import DEFAULT_BALANCE_PATTERN

DEFAULT_MAX_PER_TURN = 3

# Entity names shown before the first message arrives. Empty: the panel starts
# on its "no speakers detected" state unless the config names some.
DEFAULT_INITIAL_SPEAKERS: tuple[str, ...] = ()

EMPTY_HINT = "No speakers detected. Dialogue lines must start with Name:."


class _HostModel(BaseModel):
    """Base for models exchanged with the host: camelCase aliases, nulls mean default."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Entity(_HostModel):
    """A known speaker. ``image_url`` and ``traits`` are presentation-only."""

    name: str = ""
    aliases: list[str] = Field(default_factory=list)
    image_url: str = ""
    traits: list[str] = Field(default_factory=list)


class StageConfig(_HostModel):
    """Per-session configuration, resolved once when the stage is built."""

    show_panel: bool = True
    max_per_turn: int = DEFAULT_MAX_PER_TURN
    fallback_to_author: bool = False
    characters: list[Entity] = Field(default_factory=list)
    show_balance: bool = True
    balance_regex: str = DEFAULT_BALANCE_PATTERN
    initial_speakers: list[str] = Field(default_factory=list)
    currency_label: str = "C"

    @model_validator(mode="after")
    def _blank_pattern_means_default(self) -> StageConfig:
        if not self.balance_regex:
            self.balance_regex = DEFAULT_BALANCE_PATTERN
        return self

    @property
    def turn_limit(self) -> int:
        """Per-turn cap, never below one."""
        return max(1, self.max_per_turn)


class Participant(_HostModel):
    name: str | None = None
    role: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_non_strings(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if isinstance(v, str)}
        return data


_TEXT_FIELDS = frozenset({"role", "text", "content", "body"})
_PARTICIPANT_FIELDS = frozenset({"author", "character"})


class IncomingMessage(_HostModel):
    """A chat message as delivered by the host.

    The host is loose about field names, so the text and the author name each
    have several candidate fields, resolved in a fixed priority order.
    """

    role: str | None = None
    author: Participant | None = None
    character: Participant | None = None
    text: str | None = None
    content: str | None = None
    body: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_malformed(cls, data: Any) -> Any:
        # A field of the wrong shape counts as absent.
        if not isinstance(data, dict):
            return data
        return {
            k: v for k, v in data.items()
            if not (k in _TEXT_FIELDS and not isinstance(v, str))
            and not (k in _PARTICIPANT_FIELDS and not isinstance(v, (dict, Participant)))
        }

    def is_from_user(self) -> bool:
        role = self.role or (self.author.role if self.author else None) or ""
        return role.lower() == "user"

    def resolve_text(self) -> str:
        """First present of ``text``, ``content``, ``body``; ``""`` if none."""
        for candidate in (self.text, self.content, self.body):
            if candidate is not None:
                return candidate
        return ""

    def resolve_author_name(self, bot_name: str = "") -> str:
        """First non-empty of ``author.name``, ``character.name``, the bot name."""
        return (
            (self.author.name if self.author else None)
            or (self.character.name if self.character else None)
            or bot_name
            or ""
        )


class TurnState(_HostModel):
    """State persisted by the host between turns."""

    last_speakers: list[Entity] = Field(default_factory=list)
    balance: float | None = Field(default=None, alias="balanceC")


class LoadResult(_HostModel):
    success: bool
    ui: dict[str, Any] = Field(default_factory=dict)
    state: TurnState


class ViewModel(_HostModel):
    """What the presentation layer needs to paint the panel."""

    speakers: list[Entity]
    balance: float | None = None
    hidden: bool = False
    show_balance: bool = True
    currency_label: str = "C"
    empty_hint: str = EMPTY_HINT
