# Special search modes that bypass the generic tiered retrieval:
#  - "most used voices in language X": usage-sorted fetch, scored by usage
#  - "voices similar to <voice_id>": acoustic neighbours of a catalog voice

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from .catalog import HIGH_QUALITY_CATEGORY, CatalogError, CatalogQuery, VoiceCatalog, to_candidates
from .heuristics import detect_voice_language, normalize_language_code, usage_proxy
from .types import SearchMode, SearchPlan, SourceTier, SpecialIntent, VoiceCandidate

logger = logging.getLogger(__name__)

TOP_FETCH_SIZE = 100
TOP_CAP = 80
USAGE_FLOOR = 0.01

_USAGE_PHRASES = (
    "most used",
    "most popular",
    "most frequently used",
    "top used",
    "top voices",
    "najczęściej używan",
    "najczesciej uzywan",
    "najpopularniejsz",
    "más usad",
    "mas usad",
    "más populares",
    "mas populares",
    "meistgenutzt",
    "beliebteste",
)
_SIMILAR_RE = re.compile(r"\b(similar|like|podobn\w*|parecid\w*|ähnlich\w*)\b", re.IGNORECASE)
_VOICE_ID_RE = re.compile(r"\b[A-Za-z0-9]{18,}\b")


def wants_most_used(text: str) -> bool:
    lower = (text or "").lower()
    return any(p in lower for p in _USAGE_PHRASES)


def extract_similar_voice_id(text: str) -> Optional[str]:
    """Voice id from "similar to <id>" style requests, else None."""
    if not text or not _SIMILAR_RE.search(text):
        return None
    match = _VOICE_ID_RE.search(text)
    return match.group(0) if match else None


def detect_special_intent(text: str, plan: SearchPlan) -> SpecialIntent:
    voice_id = extract_similar_voice_id(text)
    if voice_id:
        return SpecialIntent(mode=SearchMode.SIMILAR, voice_id=voice_id)

    if not wants_most_used(text):
        return SpecialIntent()

    language = normalize_language_code(plan.target_voice_language) or detect_voice_language(text)
    if not language:
        logger.info("most-used request without a resolvable language, using generic search")
        return SpecialIntent()
    return SpecialIntent(mode=SearchMode.TOP_BY_LANGUAGE, language=language)


# -------------------------
# Top by language
# -------------------------
def fetch_top_by_language(catalog: VoiceCatalog, language: str, quality: str = "any") -> List[VoiceCandidate]:
    query = CatalogQuery(page_size=TOP_FETCH_SIZE, language=language)
    if quality == "high_only":
        query.category = HIGH_QUALITY_CATEGORY
    try:
        records = catalog.search(query)
        if not records and query.category:
            # nothing tagged server-side; the session filter narrows locally
            logger.info("no %s voices tagged high quality, retrying without category", language)
            records = catalog.search(CatalogQuery(page_size=TOP_FETCH_SIZE, language=language))
    except CatalogError as e:
        logger.warning("top-by-language fetch failed: %s", e)
        return []
    voices = to_candidates(records, SourceTier.PRIMARY)
    # sorted() is stable, so equal usage keeps fetch order
    voices = sorted(voices, key=usage_proxy, reverse=True)
    return voices[:TOP_CAP]


def usage_scores(voices: List[VoiceCandidate]) -> Dict[str, float]:
    n = len(voices)
    max_usage = max((usage_proxy(v) for v in voices), default=0)
    if max_usage <= 0:
        return {v.voice_id: (n - i) / max(n, 1) for i, v in enumerate(voices)}

    scores = {}
    for v in voices:
        usage = usage_proxy(v)
        scores[v.voice_id] = max(usage / max_usage, USAGE_FLOOR) if usage > 0 else 0.0
    return scores


# -------------------------
# Similar voices
# -------------------------
def fetch_similar_voices(catalog: VoiceCatalog, voice_id: str) -> List[VoiceCandidate]:
    try:
        base = catalog.find_voice(voice_id)
        if not base or not base.get("preview_url"):
            logger.info("no previewable voice found for %s", voice_id)
            return []
        audio = catalog.download(base["preview_url"])
        records = catalog.similar_voices(audio, filename=f"{voice_id}.mp3")
    except CatalogError as e:
        logger.warning("similar-voices lookup failed: %s", e)
        return []

    # the seed voice is not a useful suggestion for itself
    return [v for v in to_candidates(records, SourceTier.PRIMARY) if v.voice_id != voice_id]
