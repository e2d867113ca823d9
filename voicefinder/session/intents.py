# Follow-up intent predicates over normalized message text.
# Each predicate is independent; precedence between them is decided by the
# conversation handler (languages > which-high-quality > filter change).

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..search.heuristics import detect_quality_preference
from .types import FilterState


def normalize_text(text: Optional[str]) -> str:
    return " ".join((text or "").lower().split())


def _any_phrase(*phrases: str) -> Callable[[str], bool]:
    return lambda lower: any(p in lower for p in phrases)


def _pattern(regex: str) -> Callable[[str], bool]:
    compiled = re.compile(regex)
    return lambda lower: bool(compiled.search(lower))


# -------------------------
# Informational intents
# -------------------------
_LANGUAGE_WORDS = _pattern(r"\b(languages?|język\w*|jezyk\w*|idiomas?|sprachen?)\b")
_WHICH_WORDS = _any_phrase("which", "które", "ktore", "cuáles", "cuales", "welche")
_HIGH_QUALITY_WORDS = _pattern(
    r"high quality|\bhq\b|wysokiej jakości|wysoka jakość|wysokiej jakosci|wysoka jakosc|alta calidad"
)


def wants_languages_summary(lower: str) -> bool:
    return _LANGUAGE_WORDS(lower)


def wants_high_quality_list(lower: str) -> bool:
    return _WHICH_WORDS(lower) and _HIGH_QUALITY_WORDS(lower)


# -------------------------
# Filter mutations
# -------------------------
@dataclass(frozen=True)
class FilterRule:
    dimension: str
    value: object
    matches: Callable[[str], bool]


def _quality_is(expected: str) -> Callable[[str], bool]:
    return lambda lower: detect_quality_preference(lower) == expected


# evaluated in order; within one message the last matching rule wins per dimension
FILTER_RULES: Tuple[FilterRule, ...] = (
    FilterRule("gender", "female", _pattern(
        r"\b(only|just) (female|women|woman)\b|\bfemale (voices )?only\b"
        r"|\btylko (kobiec\w*|kobiet\w*|damsk\w*)|\bsolo (femenin\w*|mujer\w*)"
    )),
    FilterRule("gender", "male", _pattern(
        r"\b(only|just) (male|men|man)\b|\bmale (voices )?only\b"
        r"|\btylko (męsk\w*|mesk\w*|mężczyzn\w*|mezczyzn\w*)|\bsolo (masculin\w*|hombre\w*)"
    )),
    FilterRule("gender", "any", _pattern(
        r"\b(all|both|any) genders?\b|\bwszystkie płcie\b|\bobie płcie\b|\btodos los géneros\b"
    )),
    FilterRule("quality", "any", _pattern(r"\b(any|all) quality\b|\bdowolna jakość\b")),
    FilterRule("quality", "high_only", _quality_is("high_only")),
    FilterRule("quality", "no_high", _quality_is("no_high")),
    FilterRule("list_all", True, _pattern(
        r"\b(list|show) all\b|\bpokaż wszystkie\b|\bpokaz wszystkie\b|\bmostrar tod[oa]s\b"
    )),
)


def detect_filter_changes(lower: str, rules: Tuple[FilterRule, ...] = FILTER_RULES) -> List[FilterRule]:
    """Last matching rule per dimension, in rule order."""
    winners = {}
    for rule in rules:
        if rule.matches(lower):
            winners[rule.dimension] = rule
    return list(winners.values())


def apply_filter_changes(filters: FilterState, changes: List[FilterRule]) -> bool:
    """Mutate ``filters`` in place; True when at least one rule matched."""
    for rule in changes:
        setattr(filters, rule.dimension, rule.value)
    return bool(changes)


def wants_list_all(lower: str) -> bool:
    return any(rule.dimension == "list_all" for rule in detect_filter_changes(lower))
