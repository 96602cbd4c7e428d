"""Balance extraction from free message text.

The balance is "last known good" state: a turn whose text carries no
recognisable balance keeps the previous value rather than clearing it.
The pattern is user-supplied, so compiling and running it never raises,
and a search that runs past SEARCH_TIMEOUT counts as no match.
"""

from __future__ import annotations

import logging
import math
import re

import regex

logger = logging.getLogger(__name__)

# Optional "C" marker followed by digits with comma/dot grouping, e.g. "C 12,345.67".
DEFAULT_BALANCE_PATTERN = r"C\s*([0-9][0-9,\.]*)"

# Seconds a single pattern search may take.
SEARCH_TIMEOUT = 0.25

_STRIP_RE = re.compile(r"[,\s]")


def extract_balance(
    text: str | None, pattern: str | None, previous: float | None
) -> float | None:
    """Return the balance found in ``text``, or ``previous`` if there is none.

    ``pattern`` is searched case-insensitively and its first capturing group is
    taken as the number. An empty or missing pattern means the default.
    """
    raw = _first_group(text or "", pattern or DEFAULT_BALANCE_PATTERN)
    if not raw:
        return previous

    cleaned = _STRIP_RE.sub("", raw)
    try:
        value = float(cleaned)
    except ValueError:
        logger.debug("Balance token %r is not a number", raw)
        return previous
    if not math.isfinite(value):
        return previous
    return value


def _first_group(text: str, pattern: str) -> str | None:
    try:
        match = regex.compile(pattern, regex.IGNORECASE).search(text, timeout=SEARCH_TIMEOUT)
        if not match:
            return None
        return match.group(1)
    except TimeoutError:
        logger.debug("Balance pattern %r timed out after %ss", pattern, SEARCH_TIMEOUT)
        return None
    except (regex.error, IndexError) as e:
        logger.debug("Balance pattern %r unusable: %s", pattern, e)
        return None
