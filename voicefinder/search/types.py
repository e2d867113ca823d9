# Data models for the search layer: the structured plan, catalog candidates,
# their source tiers, and the typed results returned by the two oracles.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

QUALITY_PREFERENCES = ("any", "high_only", "no_high")
PLAN_GENDERS = ("male", "female", "neutral")
MAX_SEARCH_QUERIES = 7


class SourceTier(str, Enum):
    """How a candidate was discovered. Declaration order is trust order."""

    PRIMARY = "primary"
    LANGUAGE = "language"
    FALLBACK = "fallback"

    @property
    def trust(self) -> int:
        return _TIER_TRUST[self]

    @property
    def multiplier(self) -> float:
        return _TIER_MULTIPLIER[self]


_TIER_TRUST = {SourceTier.PRIMARY: 3, SourceTier.LANGUAGE: 2, SourceTier.FALLBACK: 1}
_TIER_MULTIPLIER = {SourceTier.PRIMARY: 1.0, SourceTier.LANGUAGE: 0.9, SourceTier.FALLBACK: 0.5}


class SearchMode(str, Enum):
    GENERIC = "generic"
    TOP_BY_LANGUAGE = "top_by_language"
    SIMILAR = "similar"


@dataclass
class SearchPlan:
    """Structured intent extracted from the user's brief."""

    interface_language: str
    search_queries: List[str]
    target_voice_language: Optional[str] = None
    target_accent: Optional[str] = None
    target_gender: Optional[str] = None
    use_cases: List[str] = field(default_factory=list)
    descriptives: List[str] = field(default_factory=list)
    quality_preference: str = "any"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interface_language": self.interface_language,
            "target_voice_language": self.target_voice_language,
            "target_accent": self.target_accent,
            "target_gender": self.target_gender,
            "use_cases": list(self.use_cases),
            "descriptives": list(self.descriptives),
            "quality_preference": self.quality_preference,
            "search_queries": list(self.search_queries),
        }


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class VoiceCandidate:
    """One shared-library voice plus the tier that produced it."""

    voice_id: str
    name: str
    tier: SourceTier = SourceTier.PRIMARY
    language: Optional[str] = None
    accent: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[str] = None
    descriptive: Optional[str] = None
    use_case: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    usage_character_count_7d: Optional[int] = None
    usage_character_count_1y: Optional[int] = None
    cloned_by_count: Optional[int] = None
    high_quality_base_model_ids: List[str] = field(default_factory=list)
    verified_languages: List[Dict[str, Any]] = field(default_factory=list)
    labels: Dict[str, Any] = field(default_factory=dict)
    sharing: Dict[str, Any] = field(default_factory=dict)
    preview_url: Optional[str] = None
    public_owner_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], tier: SourceTier) -> Optional["VoiceCandidate"]:
        """Build from a raw catalog record; records without an id are skipped."""
        if not isinstance(data, dict):
            return None
        voice_id = data.get("voice_id")
        if not voice_id:
            return None

        def _text(key: str) -> Optional[str]:
            val = data.get(key)
            return str(val) if val not in (None, "") else None

        hq_models = data.get("high_quality_base_model_ids")
        verified = data.get("verified_languages")
        labels = data.get("labels")
        sharing = data.get("sharing")
        return cls(
            voice_id=str(voice_id),
            name=_text("name") or str(voice_id),
            tier=tier,
            language=_text("language"),
            accent=_text("accent"),
            gender=_text("gender"),
            age=_text("age"),
            descriptive=_text("descriptive"),
            use_case=_text("use_case"),
            description=_text("description"),
            category=_text("category"),
            usage_character_count_7d=_as_int(data.get("usage_character_count_7d")),
            usage_character_count_1y=_as_int(data.get("usage_character_count_1y")),
            cloned_by_count=_as_int(data.get("cloned_by_count")),
            high_quality_base_model_ids=[str(m) for m in hq_models] if isinstance(hq_models, list) else [],
            verified_languages=[v for v in verified if isinstance(v, dict)] if isinstance(verified, list) else [],
            labels=labels if isinstance(labels, dict) else {},
            sharing=sharing if isinstance(sharing, dict) else {},
            preview_url=_text("preview_url"),
            public_owner_id=_text("public_owner_id"),
        )


@dataclass
class PlanResult:
    """Planner outcome; ``degraded`` marks a plan built from heuristics only."""

    plan: SearchPlan
    degraded: bool = False
    reason: Optional[str] = None


@dataclass
class RankingResult:
    """Ranking outcome; ``degraded`` marks pure positional scoring."""

    scores: Dict[str, float]
    user_language: str
    degraded: bool = False
    reason: Optional[str] = None


@dataclass
class SpecialIntent:
    mode: SearchMode = SearchMode.GENERIC
    language: Optional[str] = None
    voice_id: Optional[str] = None
