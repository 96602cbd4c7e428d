"""Speaker detection from attribution lines.

An attribution line starts with a name followed by a colon or hyphen:

    Amelie: I am here.
    > **Maya:** hello
    Blair – hello

Markdown bullets, quotes and bold/italic wrappers are tolerated; smart dashes
and the full-width colon are folded to their ASCII forms first. Names resolve
through the alias index, so only roster entities are ever reported.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from portrait_stage.models import Entity
from portrait_stage.roster import build_alias_index, canonicalize

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_DASH_RE = re.compile("[\u2013\u2014]")
_LEADING_MARKER_RE = re.compile(r"^\s*(?:>|\*|-|[0-9]+\.)\s*")
_OPENING_EMPHASIS_RE = re.compile(r"^\s*(\*\*|__|\*)")
_CLOSING_EMPHASIS_RE = re.compile(r"(\*\*|__|\*)\s*$")
# Name must start with a letter and run at most 41 characters before the delimiter.
_ATTRIBUTION_RE = re.compile(r"^\s*([A-Za-z][A-Za-z0-9_ .'\-]{0,40})\s*[:\-]\s*(.+)?$")


@dataclass(frozen=True)
class Attribution:
    """One attribution line that resolved to a roster entity."""

    entity: Entity
    candidate: str  # the name as written, before canonicalization
    remainder: str  # what follows the delimiter; may be empty
    line_no: int  # 1-based


def _strip_markdown(line: str) -> str:
    line = _LEADING_MARKER_RE.sub("", line, count=1)
    line = _OPENING_EMPHASIS_RE.sub("", line, count=1)
    return _CLOSING_EMPHASIS_RE.sub("", line, count=1)


def scan_attributions(text: str | None, roster: Iterable[Entity] | None) -> list[Attribution]:
    """Return every attribution line in ``text`` that names a roster entity, in order."""
    if not text:
        return []
    index = build_alias_index(roster)
    normalized = _DASH_RE.sub("-", text).replace("\uff1a", ":")

    found: list[Attribution] = []
    for line_no, line in enumerate(_LINE_SPLIT_RE.split(normalized), start=1):
        match = _ATTRIBUTION_RE.match(_strip_markdown(line))
        if not match:
            continue
        entity = index.get(canonicalize(match.group(1)))
        if entity is None:
            continue
        found.append(Attribution(
            entity=entity,
            candidate=match.group(1),
            remainder=(match.group(2) or "").strip(),
            line_no=line_no,
        ))
    return found


def scan_speakers(text: str | None, roster: Iterable[Entity] | None) -> list[Entity]:
    """Entities speaking in ``text``, de-duplicated, in order of first appearance."""
    hits: list[Entity] = []
    seen: set[str] = set()
    for attribution in scan_attributions(text, roster):
        if attribution.entity.name not in seen:
            hits.append(attribution.entity)
            seen.add(attribution.entity.name)
    return hits
