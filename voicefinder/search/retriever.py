# Tiered candidate retriever over the shared voice library:
#  - primary: one query per plan search phrase, with every known filter
#  - language: one broad query filtered by language only
#  - fallback: one unfiltered query, capped so it cannot flood the results
# Candidates are deduplicated by voice_id and keep their most trusted tier.

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .catalog import HIGH_QUALITY_CATEGORY, CatalogError, CatalogQuery, VoiceCatalog, to_candidates
from .heuristics import is_high_quality, is_voice_in_language, usage_proxy
from .types import SearchPlan, SourceTier, VoiceCandidate

logger = logging.getLogger(__name__)

MAX_PRIMARY_QUERIES = 5
PRIMARY_SUFFICIENT = 50
LANGUAGE_TIER_BELOW = 25
FALLBACK_TIER_BELOW = 15
FALLBACK_CAP = 10
MIN_LANGUAGE_MATCHES = 8

PRIMARY_PAGE_SIZE = 40
LANGUAGE_PAGE_SIZE = 60
FALLBACK_PAGE_SIZE = 40


def merge_candidates(pool: Dict[str, VoiceCandidate], incoming: List[VoiceCandidate]) -> int:
    """Merge into ``pool`` (insertion ordered); returns the number of new ids.

    An id already present is only re-tagged when the incoming tier is more
    trusted; it never moves and never loses trust.
    """
    added = 0
    for voice in incoming:
        existing = pool.get(voice.voice_id)
        if existing is None:
            pool[voice.voice_id] = voice
            added += 1
        elif voice.tier.trust > existing.tier.trust:
            existing.tier = voice.tier
    return added


def cap_fallback(voices: List[VoiceCandidate], cap: int = FALLBACK_CAP) -> List[VoiceCandidate]:
    """Trusted candidates in arrival order, then the most used fallback ones."""
    trusted = [v for v in voices if v.tier is not SourceTier.FALLBACK]
    fallback = [v for v in voices if v.tier is SourceTier.FALLBACK]
    fallback.sort(key=usage_proxy, reverse=True)
    return trusted + fallback[:cap]


def filter_language(voices: List[VoiceCandidate], language: Optional[str],
                    min_matches: int = MIN_LANGUAGE_MATCHES) -> List[VoiceCandidate]:
    if not language:
        return voices
    matching = [v for v in voices if is_voice_in_language(v, language)]
    if len(matching) >= min_matches:
        return matching
    return voices


def filter_quality(voices: List[VoiceCandidate], preference: str) -> List[VoiceCandidate]:
    if preference == "high_only":
        filtered = [v for v in voices if is_high_quality(v)]
    elif preference == "no_high":
        filtered = [v for v in voices if not is_high_quality(v)]
    else:
        return voices
    return filtered or voices


class Retriever:
    def __init__(self, catalog: VoiceCatalog):
        self.catalog = catalog

    # -------------------------
    # Query builders
    # -------------------------
    @staticmethod
    def _primary_query(plan: SearchPlan, text: str, category: Optional[str] = None) -> CatalogQuery:
        gender = plan.target_gender if plan.target_gender in ("male", "female") else None
        return CatalogQuery(
            page_size=PRIMARY_PAGE_SIZE,
            search=text,
            language=plan.target_voice_language,
            accent=plan.target_accent,
            gender=gender,
            use_cases=list(plan.use_cases),
            descriptives=list(plan.descriptives),
            category=category,
        )

    @staticmethod
    def _language_query(plan: SearchPlan) -> CatalogQuery:
        return CatalogQuery(page_size=LANGUAGE_PAGE_SIZE, language=plan.target_voice_language)

    @staticmethod
    def _fallback_query(plan: SearchPlan) -> CatalogQuery:
        return CatalogQuery(page_size=FALLBACK_PAGE_SIZE, search=plan.search_queries[0])

    def _fetch(self, query: CatalogQuery, tier: SourceTier) -> List[VoiceCandidate]:
        try:
            records = self.catalog.search(query)
        except CatalogError as e:
            logger.warning("%s tier query failed, treating as empty: %s", tier.value, e)
            return []
        voices = to_candidates(records, tier)
        logger.debug("%s tier %s -> %d voices", tier.value, query.to_params(), len(voices))
        return voices

    def _fetch_primary(self, plan: SearchPlan, pool: Dict[str, VoiceCandidate], category: Optional[str]) -> None:
        for text in plan.search_queries[:MAX_PRIMARY_QUERIES]:
            if len(pool) >= PRIMARY_SUFFICIENT:
                break
            query = self._primary_query(plan, text, category)
            merge_candidates(pool, self._fetch(query, SourceTier.PRIMARY))

    # -------------------------
    # Public API
    # -------------------------
    def retrieve(self, plan: SearchPlan) -> List[VoiceCandidate]:
        pool: Dict[str, VoiceCandidate] = {}

        # 1) PRIMARY: one query per search phrase until we have enough
        category = HIGH_QUALITY_CATEGORY if plan.quality_preference == "high_only" else None
        self._fetch_primary(plan, pool, category)
        if not pool and category:
            # nothing tagged server-side; filter_quality narrows locally instead
            logger.info("no voices tagged high quality, retrying primary tier without category")
            self._fetch_primary(plan, pool, None)

        # 2) LANGUAGE: broaden to the whole language when thin
        if len(pool) < LANGUAGE_TIER_BELOW and plan.target_voice_language:
            merge_candidates(pool, self._fetch(self._language_query(plan), SourceTier.LANGUAGE))

        # 3) FALLBACK: anything at all
        if len(pool) < FALLBACK_TIER_BELOW:
            merge_candidates(pool, self._fetch(self._fallback_query(plan), SourceTier.FALLBACK))

        voices = cap_fallback(list(pool.values()))
        voices = filter_language(voices, plan.target_voice_language)
        voices = filter_quality(voices, plan.quality_preference)

        logger.info(
            "retrieved %d unique voices (%s)",
            len(voices),
            ", ".join(f"{t.value}={sum(1 for v in voices if v.tier is t)}" for t in SourceTier),
        )
        return voices
