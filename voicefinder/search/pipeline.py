# New-search pipeline:
#   text -> plan -> {special mode?} -> candidates -> scores -> Session
# Returns a SearchOutcome; the caller decides what to post and whether to
# store the session.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..generate.generator import JsonOracle
from ..session.intents import normalize_text, wants_list_all
from ..session.types import FilterState, Session
from .catalog import VoiceCatalog
from .planner import build_plan
from .rank import rank_candidates, resolve_ui_language
from .retriever import Retriever
from .special import detect_special_intent, fetch_similar_voices, fetch_top_by_language, usage_scores
from .types import PlanResult, RankingResult, SearchMode, SearchPlan, VoiceCandidate

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    plan_result: PlanResult
    mode: SearchMode
    ui_language: str
    session: Optional[Session] = None

    @property
    def found(self) -> bool:
        return self.session is not None


def initial_filters(plan: SearchPlan, text: str) -> FilterState:
    gender = plan.target_gender if plan.target_gender in ("male", "female") else "any"
    return FilterState(
        gender=gender,
        quality=plan.quality_preference,
        list_all=wants_list_all(normalize_text(text)),
    )


class SearchPipeline:
    def __init__(self, catalog: VoiceCatalog, planner: JsonOracle, ranker: JsonOracle,
                 default_language: str = "en"):
        self.catalog = catalog
        self.planner = planner
        self.ranker = ranker
        self.retriever = Retriever(catalog)
        self.default_language = default_language

    def run(self, text: str, thread_id: str,
            on_planned: Optional[Callable[[SearchPlan], None]] = None) -> SearchOutcome:
        plan_result = build_plan(text, self.planner)
        plan = plan_result.plan
        if on_planned is not None:
            on_planned(plan)

        intent = detect_special_intent(text, plan)
        logger.info("thread %s: mode=%s language=%s degraded_plan=%s",
                    thread_id, intent.mode.value, plan.target_voice_language, plan_result.degraded)

        if intent.mode is SearchMode.TOP_BY_LANGUAGE:
            voices = fetch_top_by_language(self.catalog, intent.language, plan.quality_preference)
            ranking = RankingResult(
                scores=usage_scores(voices),
                user_language=resolve_ui_language(None, plan, text, self.default_language),
            )
        elif intent.mode is SearchMode.SIMILAR:
            voices = fetch_similar_voices(self.catalog, intent.voice_id)
            ranking = self._rank(text, plan, voices)
        else:
            voices = self.retriever.retrieve(plan)
            ranking = self._rank(text, plan, voices)

        if not voices:
            return SearchOutcome(
                plan_result=plan_result,
                mode=intent.mode,
                ui_language=resolve_ui_language(None, plan, text, self.default_language),
            )

        session = Session(
            thread_id=thread_id,
            original_query=text,
            plan=plan,
            voices=voices,
            ranking=ranking.scores,
            ui_language=ranking.user_language,
            filters=initial_filters(plan, text),
            mode=intent.mode,
        )
        return SearchOutcome(plan_result=plan_result, mode=intent.mode,
                             ui_language=ranking.user_language, session=session)

    def _rank(self, text: str, plan: SearchPlan, voices: List[VoiceCandidate]) -> RankingResult:
        if not voices:
            return RankingResult(scores={}, user_language=resolve_ui_language(None, plan, text, self.default_language))
        return rank_candidates(text, plan, voices, self.ranker, self.default_language)
