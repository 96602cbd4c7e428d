"""Tests for canonical keys, the alias index and roster resolution."""

from portrait_stage.models import Entity, StageConfig
from portrait_stage.roster import (
    DEFAULT_ROSTER,
    build_alias_index,
    canonicalize,
    resolve_names,
    resolve_roster,
)


# ── canonicalize ───────────────────────────────────────────


def test_canonicalize_accent_and_case():
    assert canonicalize("Amélie") == canonicalize("AMELIE") == canonicalize("amelie") == "amelie"


def test_canonicalize_drops_spaces_and_punctuation():
    assert canonicalize("Lena Oxton") == "lenaoxton"
    assert canonicalize(" Shadow-Heart! ") == "shadowheart"
    assert canonicalize("O'Neil.") == "oneil"


def test_canonicalize_keeps_digits():
    assert canonicalize("Unit 734") == "unit734"


def test_canonicalize_empty_and_none():
    assert canonicalize("") == ""
    assert canonicalize(None) == ""
    assert canonicalize("—!?") == ""


def test_canonicalize_idempotent():
    for s in ["Amélie", "Nico Robin", "  __x__ ", "Ça va? 12", "ÆØÅ"]:
        assert canonicalize(canonicalize(s)) == canonicalize(s)


# ── build_alias_index ──────────────────────────────────────


def test_index_contains_names_and_aliases():
    widow = Entity(name="Widowmaker", aliases=["Amelie", "Amélie", "Lacroix"])
    index = build_alias_index([widow])
    assert set(index) == {"widowmaker", "amelie", "lacroix"}
    assert all(e is widow for e in index.values())


def test_index_empty_roster():
    assert build_alias_index([]) == {}
    assert build_alias_index(None) == {}


def test_index_skips_nameless_entity_but_keeps_aliases():
    ghost = Entity(aliases=["Ghost", ""])
    index = build_alias_index([ghost, Entity(name="Maya")])
    assert index["ghost"] is ghost
    assert "maya" in index
    assert "" not in index


def test_index_collision_last_wins():
    first = Entity(name="Robin")
    second = Entity(name="Nico Robin", aliases=["Robin"])
    index = build_alias_index([first, second])
    assert index["robin"] is second


# ── resolve_roster / resolve_names ─────────────────────────


def test_default_roster_when_config_has_none():
    assert resolve_roster(StageConfig()) is DEFAULT_ROSTER


def test_config_roster_wins():
    roster = [Entity(name="Gareth")]
    assert resolve_roster(StageConfig(characters=roster)) == roster


def test_every_default_name_is_discoverable():
    index = build_alias_index(DEFAULT_ROSTER)
    for entity in DEFAULT_ROSTER:
        assert index[canonicalize(entity.name)] is entity


def test_default_roster_names_unique():
    names = [e.name for e in DEFAULT_ROSTER]
    assert len(names) == len(set(names))


def test_resolve_names_order_dedupe_and_misses():
    found = resolve_names(["Becca", "Nobody", "Lilith", "Rebecca"], DEFAULT_ROSTER)
    assert [e.name for e in found] == ["Rebecca", "Lilith"]
