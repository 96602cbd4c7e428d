"""Tests for scan_speakers and scan_attributions."""

from portrait_stage.models import Entity
from portrait_stage.roster import DEFAULT_ROSTER
from portrait_stage.scanner import scan_attributions, scan_speakers

ROSTER = [
    Entity(name="Widowmaker", aliases=["Amelie", "Amélie", "Lacroix"]),
    Entity(name="Ankha"),
    Entity(name="Blair"),
    Entity(name="Maya"),
    Entity(name="Nami"),
    Entity(name="Tracer", aliases=["Lena", "Oxton", "Lena Oxton"]),
]


def names(entities):
    return [e.name for e in entities]


# ── scan_speakers ──────────────────────────────────────────


def test_alias_resolves_to_entity():
    assert names(scan_speakers("Amelie: I am here.\n", ROSTER)) == ["Widowmaker"]


def test_multiword_alias():
    assert names(scan_speakers("Lena Oxton: Cheers, love!", ROSTER)) == ["Tracer"]


def test_em_dash_and_en_dash_delimiters():
    assert names(scan_speakers("Blair — hello", ROSTER)) == ["Blair"]
    assert names(scan_speakers("Blair – hello", ROSTER)) == ["Blair"]


def test_plain_hyphen_delimiter():
    assert names(scan_speakers("Nami - Pay up.", ROSTER)) == ["Nami"]


def test_full_width_colon():
    assert names(scan_speakers("Maya： hi", ROSTER)) == ["Maya"]


def test_dedupe_keeps_first_order():
    text = "Ankha: hi\nBlair: hey\nAnkha: again\n"
    assert names(scan_speakers(text, ROSTER)) == ["Ankha", "Blair"]


def test_name_and_alias_count_once():
    text = "Widowmaker: Bonjour.\nAmelie: Encore."
    assert names(scan_speakers(text, ROSTER)) == ["Widowmaker"]


def test_markdown_quote_and_bold():
    assert names(scan_speakers("> **Maya:** hello", ROSTER)) == ["Maya"]


def test_markdown_bullets_and_numbering():
    text = "* Ankha: one\n- Blair: two\n1. Nami: three\n__Maya__: four"
    assert names(scan_speakers(text, ROSTER)) == ["Ankha", "Blair", "Nami", "Maya"]


def test_italic_wrapped_line():
    assert names(scan_speakers("*Nami: Where's my money?*", ROSTER)) == ["Nami"]


def test_bare_name_with_nothing_after_delimiter():
    assert names(scan_speakers("Blair:", ROSTER)) == ["Blair"]


def test_crlf_lines():
    assert names(scan_speakers("Ankha: a\r\nBlair: b\r\n", ROSTER)) == ["Ankha", "Blair"]


def test_leading_whitespace():
    assert names(scan_speakers("    Maya: indented", ROSTER)) == ["Maya"]


def test_digit_led_candidate_never_matches():
    roster = ROSTER + [Entity(name="Unit", aliases=["123"])]
    assert scan_speakers("123: not a name", roster) == []


def test_candidate_longer_than_41_chars_is_no_match():
    roster = [Entity(name="A" * 42)]
    assert scan_speakers("A" * 42 + ": hi", roster) == []
    assert names(scan_speakers("A" * 41 + ": hi", [Entity(name="A" * 41)])) == ["A" * 41]


def test_unknown_names_and_narration_skipped():
    text = "The hall is quiet.\nStranger: Who are you?\nShe sighs."
    assert scan_speakers(text, ROSTER) == []


def test_name_mid_line_is_not_attribution():
    assert scan_speakers("Then Maya said: hello", ROSTER) == []


def test_empty_text():
    assert scan_speakers("", ROSTER) == []
    assert scan_speakers(None, ROSTER) == []


def test_empty_roster():
    assert scan_speakers("Maya: hi", []) == []


def test_returns_roster_entities():
    hits = scan_speakers("Maya: hi", ROSTER)
    assert hits[0] is ROSTER[3]


def test_default_roster_aliases():
    text = "Becca: Hey.\nKael: Hm.\nNico Robin: Interesting."
    assert names(scan_speakers(text, DEFAULT_ROSTER)) == ["Rebecca", "Kaelen", "Nico Robin"]


# ── scan_attributions ──────────────────────────────────────


def test_attributions_keep_every_line():
    text = "Ankha: hi\nnarration\nAmelie - Bonjour.\nAnkha: again"
    hits = scan_attributions(text, ROSTER)
    assert [(h.entity.name, h.line_no) for h in hits] == [
        ("Ankha", 1), ("Widowmaker", 3), ("Ankha", 4),
    ]
    assert hits[1].candidate.strip() == "Amelie"
    assert hits[1].remainder == "Bonjour."


def test_attribution_empty_remainder():
    hits = scan_attributions("Blair:", ROSTER)
    assert hits[0].remainder == ""


def test_non_ascii_candidate_is_no_match():
    # The accented alias still resolves through fallback-to-author, not via lines.
    assert scan_speakers("Amélie: Non.", ROSTER) == []


def test_numbered_marker_needs_ascii_digits():
    assert scan_speakers("١. Maya: hi", ROSTER) == []
    assert names(scan_speakers("12. Maya: hi", ROSTER)) == ["Maya"]
