# Ranking fusion: combine the curator oracle's per-voice scores with the
# tier trust multipliers. Stateless; always returns a score for every
# submitted candidate, or pure positional scores when the oracle is unusable.

from __future__ import annotations

import logging
import numbers
from typing import Any, Dict, List, Optional

from ..generate.generator import JsonOracle, OracleError
from .heuristics import guess_ui_language, normalize_language_code, usage_proxy
from .prompts import RANKER_SYSTEM_PROMPT
from .types import RankingResult, SearchPlan, VoiceCandidate

logger = logging.getLogger(__name__)

MAX_RANKED = 80
OMITTED_SCALE = 0.2


def _truncate(value: Optional[str], limit: int) -> Optional[str]:
    if value is None:
        return None
    return value if len(value) <= limit else value[:limit]


def summarize_candidate(voice: VoiceCandidate) -> Dict[str, Any]:
    """Bounded view of a candidate for the oracle prompt."""
    return {
        "voice_id": voice.voice_id,
        "name": _truncate(voice.name, 80),
        "language": voice.language,
        "accent": _truncate(voice.accent, 40),
        "gender": voice.gender,
        "age": voice.age,
        "use_case": _truncate(voice.use_case, 60),
        "descriptive": _truncate(voice.descriptive, 120),
        "description": _truncate(voice.description, 240),
        "category": voice.category,
        "usage": usage_proxy(voice) or None,
        "source_tier": voice.tier.value,
    }


def positional_scores(voices: List[VoiceCandidate], scale: float = 1.0) -> Dict[str, float]:
    n = max(len(voices), 1)
    return {v.voice_id: scale * (n - i) / n for i, v in enumerate(voices)}


def _is_score(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and value == value


def fuse_scores(raw: Dict[str, Any], submitted: List[VoiceCandidate]) -> Optional[Dict[str, float]]:
    """Oracle answer -> trust-weighted score per submitted voice.

    Returns None when the answer holds no usable entry at all.
    """
    ranking = raw.get("ranking")
    if not isinstance(ranking, list):
        return None

    allowed = {v.voice_id for v in submitted}
    oracle_scores: Dict[str, float] = {}
    total = max(len(ranking), 1)
    for index, item in enumerate(ranking):
        if not isinstance(item, dict):
            continue
        voice_id = item.get("voice_id")
        if not isinstance(voice_id, str):
            continue
        if voice_id not in allowed or voice_id in oracle_scores:
            continue
        score = item.get("score")
        # a known id without a number keeps the oracle's ordering
        oracle_scores[voice_id] = float(score) if _is_score(score) else (len(ranking) - index) / total

    if not oracle_scores:
        return None

    n = len(submitted)
    fused: Dict[str, float] = {}
    for i, voice in enumerate(submitted):
        base = oracle_scores.get(voice.voice_id)
        if base is None:
            base = OMITTED_SCALE * (n - i) / n
        fused[voice.voice_id] = base * voice.tier.multiplier
    return fused


def resolve_ui_language(oracle_language: Any, plan: SearchPlan, user_text: str, default: str = "en") -> str:
    return (
        normalize_language_code(oracle_language)
        or normalize_language_code(plan.interface_language)
        or normalize_language_code(guess_ui_language(user_text))
        or default
    )


def rank_candidates(user_text: str, plan: SearchPlan, voices: List[VoiceCandidate],
                    oracle: JsonOracle, default_language: str = "en") -> RankingResult:
    submitted = voices[:MAX_RANKED]
    payload = {
        "user_query": user_text,
        "search_plan": plan.to_dict(),
        "candidate_voices": [summarize_candidate(v) for v in submitted],
    }

    try:
        raw = oracle.ask(RANKER_SYSTEM_PROMPT, payload)
        scores = fuse_scores(raw, submitted)
        if scores is None:
            raise OracleError("ranking contained no usable entries")
    except OracleError as e:
        logger.warning("curator unavailable, ranking by arrival order: %s", e)
        return RankingResult(
            scores=positional_scores(voices),
            user_language=resolve_ui_language(None, plan, user_text, default_language),
            degraded=True,
            reason=str(e),
        )

    return RankingResult(
        scores=scores,
        user_language=resolve_ui_language(raw.get("user_language"), plan, user_text, default_language),
    )
