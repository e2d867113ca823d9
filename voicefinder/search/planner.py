# Plan normalizer: turns whatever the planning oracle returned into a fully
# populated SearchPlan. Never raises; oracle failures yield a heuristic plan.

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..generate.generator import JsonOracle, OracleError
from .heuristics import (
    detect_accent,
    detect_gender,
    detect_quality_preference,
    detect_voice_language,
    guess_ui_language,
    normalize_language_code,
)
from .prompts import PLANNER_SYSTEM_PROMPT
from .types import MAX_SEARCH_QUERIES, PLAN_GENDERS, QUALITY_PREFERENCES, PlanResult, SearchPlan

logger = logging.getLogger(__name__)


def _optional_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value or None


def _tag_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        tag = item.strip().lower()
        if tag and tag not in out:
            out.append(tag)
    return out


def _query_list(value: Any, user_text: str) -> List[str]:
    queries: List[str] = []
    seen = set()
    if isinstance(value, list):
        for item in value:
            if not isinstance(item, str) or not item.strip():
                continue
            query = " ".join(item.split())
            if query.lower() in seen:
                continue
            seen.add(query.lower())
            queries.append(query)
            if len(queries) == MAX_SEARCH_QUERIES:
                break
    return queries or [user_text]


def normalize_plan(raw: Any, user_text: str) -> SearchPlan:
    """Repair a planner answer field by field; missing parts come from heuristics."""
    data = raw if isinstance(raw, dict) else {}

    interface_language = normalize_language_code(data.get("interface_language")) or guess_ui_language(user_text)

    voice_language = normalize_language_code(data.get("target_voice_language"))
    if voice_language is None:
        voice_language = detect_voice_language(user_text)

    gender = _optional_text(data.get("target_gender"))
    if gender not in PLAN_GENDERS:
        gender = None

    quality = data.get("quality_preference")
    if quality not in QUALITY_PREFERENCES:
        quality = "any"
    # an explicit phrase in the brief beats the oracle's reading
    quality = detect_quality_preference(user_text) or quality

    return SearchPlan(
        interface_language=interface_language,
        target_voice_language=voice_language,
        target_accent=_optional_text(data.get("target_accent")),
        target_gender=gender,
        use_cases=_tag_list(data.get("use_cases")),
        descriptives=_tag_list(data.get("descriptives")),
        quality_preference=quality,
        search_queries=_query_list(data.get("search_queries"), user_text),
    )


def default_plan(user_text: str) -> SearchPlan:
    """Plan built purely from keyword heuristics."""
    return SearchPlan(
        interface_language=guess_ui_language(user_text),
        target_voice_language=detect_voice_language(user_text),
        target_accent=detect_accent(user_text),
        target_gender=detect_gender(user_text),
        quality_preference=detect_quality_preference(user_text) or "any",
        search_queries=[user_text],
    )


def build_plan(user_text: str, oracle: JsonOracle) -> PlanResult:
    try:
        raw = oracle.ask(PLANNER_SYSTEM_PROMPT, user_text)
    except OracleError as e:
        logger.warning("planner unavailable, using heuristic plan: %s", e)
        return PlanResult(plan=default_plan(user_text), degraded=True, reason=str(e))
    return PlanResult(plan=normalize_plan(raw, user_text))
