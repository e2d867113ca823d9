"""
Tests for follow-up intent predicates
"""
import pytest

from voicefinder.session.intents import (
    apply_filter_changes,
    detect_filter_changes,
    normalize_text,
    wants_high_quality_list,
    wants_languages_summary,
    wants_list_all,
)
from voicefinder.session.types import FilterState


def changes_for(text):
    return {rule.dimension: rule.value for rule in detect_filter_changes(normalize_text(text))}


@pytest.mark.parametrize("text", [
    "what languages are these?",
    "Jakie języki obsługują?",
    "qué idiomas hablan",
])
def test_languages_summary(text):
    assert wants_languages_summary(normalize_text(text))


@pytest.mark.parametrize("text", [
    "which are high quality",
    "które są wysokiej jakości?",
    "cuales son de alta calidad",
    "which ones are HQ",
])
def test_which_high_quality(text):
    assert wants_high_quality_list(normalize_text(text))


def test_high_quality_alone_is_not_a_which_question():
    assert not wants_high_quality_list("show only high quality")


@pytest.mark.parametrize("text, expected", [
    ("only female", {"gender": "female"}),
    ("female only please", {"gender": "female"}),
    ("tylko kobiece", {"gender": "female"}),
    ("only male", {"gender": "male"}),
    ("male only", {"gender": "male"}),
    ("tylko męskie", {"gender": "male"}),
    ("show all genders", {"gender": "any", "list_all": True}),
    ("show only high quality", {"quality": "high_only"}),
    ("no high quality", {"quality": "no_high"}),
    ("list all", {"list_all": True}),
    ("only female, high quality only", {"gender": "female", "quality": "high_only"}),
])
def test_filter_changes(text, expected):
    assert changes_for(text) == expected


def test_last_matching_rule_wins_per_dimension():
    # female rule comes first, the later male rule wins
    assert changes_for("only female... actually only male")["gender"] == "male"


def test_new_brief_changes_nothing():
    assert changes_for("a deep villain voice for a trailer") == {}


def test_gender_change_leaves_quality_untouched():
    filters = FilterState(gender="any", quality="high_only", list_all=True)

    changed = apply_filter_changes(filters, detect_filter_changes("tylko kobiece"))

    assert changed
    assert filters == FilterState(gender="female", quality="high_only", list_all=True)


def test_wants_list_all():
    assert wants_list_all("show all the voices")
    assert not wants_list_all("show me something calm")
