"""Roster handling: canonical name keys and the alias index.

A canonical key collapses case, accents, spacing and punctuation, so
"Amélie", "AMELIE" and "Amelie " all resolve to the same entity:

    "Lady Lilith" → "ladylilith"
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable

from portrait_stage.models import Entity, StageConfig

logger = logging.getLogger(__name__)

AliasIndex = dict[str, Entity]

_COMBINING_RE = re.compile("[\u0300-\u036f]")
_NON_KEY_RE = re.compile(r"[^a-z0-9]")

DEFAULT_ROSTER: list[Entity] = [
    Entity(name="Lilith", aliases=["Lady Lilith"], image_url="https://files.catbox.moe/hpcqr0.jpg"),
    Entity(name="Ankha", image_url="https://files.catbox.moe/akibog.jpg"),
    Entity(name="Widowmaker", aliases=["Amelie", "Amélie", "Lacroix"],
           image_url="https://files.catbox.moe/bzfzsg.jpg"),
    Entity(name="Rebecca", aliases=["Becca"], image_url="https://files.catbox.moe/qo4sg2.jpg"),
    Entity(name="Shadowheart", aliases=["Shadow Heart"], image_url="https://files.catbox.moe/f6salf.jpg"),
    Entity(name="Kaelen", aliases=["Kael"], image_url="https://files.catbox.moe/ce0c87.jpg"),
    Entity(name="Blair", image_url="https://files.catbox.moe/wj9iyb.jpg"),
    Entity(name="Maya", image_url="https://files.catbox.moe/REPLACE_MAYA.png"),
    Entity(name="Tracer", aliases=["Lena", "Oxton", "Lena Oxton"],
           image_url="https://files.catbox.moe/REPLACE_TRACER.png"),
    Entity(name="Nyssia", image_url="https://files.catbox.moe/REPLACE_NYSSIA.png"),
    Entity(name="Morgana", image_url="https://files.catbox.moe/REPLACE_MORGANA.png"),
    Entity(name="Nami", image_url="https://files.catbox.moe/REPLACE_NAMI.png"),
    Entity(name="Nico Robin", aliases=["Nico", "Robin", "NicoRobin"],
           image_url="https://files.catbox.moe/REPLACE_NICO_ROBIN.png"),
    Entity(name="Maki Oze", aliases=["Maki", "Oze", "MakiOze"],
           image_url="https://files.catbox.moe/REPLACE_MAKI_OZE.png"),
]


def canonicalize(text: str | None) -> str:
    """Convert a display string to its lookup key."""
    folded = unicodedata.normalize("NFD", (text or "").lower())
    folded = _COMBINING_RE.sub("", folded)
    return _NON_KEY_RE.sub("", folded)


def build_alias_index(roster: Iterable[Entity] | None) -> AliasIndex:
    """Map the canonical key of every name and alias to its entity.

    Keys that collide resolve to whichever entity came last.
    """
    index: AliasIndex = {}
    for entity in roster or []:
        if not entity.name:
            logger.warning("Roster entity without a name (aliases=%r)", entity.aliases)
        for token in [entity.name, *entity.aliases]:
            if token:
                index[canonicalize(token)] = entity
    return index


def resolve_roster(config: StageConfig) -> list[Entity]:
    """The host's roster when it has one, otherwise the built-in roster."""
    return config.characters if config.characters else DEFAULT_ROSTER


def resolve_names(names: Iterable[str], roster: Iterable[Entity]) -> list[Entity]:
    """Look up display names through the alias index, skipping misses and repeats."""
    index = build_alias_index(roster)
    found: list[Entity] = []
    seen: set[str] = set()
    for name in names:
        entity = index.get(canonicalize(name))
        if entity and entity.name not in seen:
            found.append(entity)
            seen.add(entity.name)
    return found
