# Conversation memory: one Session per chat thread.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..search.types import SearchMode, SearchPlan, VoiceCandidate

GENDER_FILTERS = ("any", "male", "female")


@dataclass
class FilterState:
    gender: str = "any"
    quality: str = "any"
    list_all: bool = False


@dataclass
class Session:
    """Shortlist of one thread: candidates, their scores and the active filters."""
    thread_id: str
    original_query: str
    plan: SearchPlan
    voices: List[VoiceCandidate]
    ranking: Dict[str, float]
    ui_language: str
    filters: FilterState = field(default_factory=FilterState)
    mode: SearchMode = SearchMode.GENERIC
