# Renders a Session as line-oriented text:
#
#   ### <section>            (standard first, then high quality)
#   **<gender group>:**      (female, male, other; or only the filtered one)
#   - <url|name> `voice_id`  (or the explicit "no voices" line)
#
# followed by a footer picked by the gender filter. Output depends only on
# the session, so re-rendering an unchanged session is byte-identical.

from __future__ import annotations

from typing import Dict, List
from urllib.parse import quote

from ..search.heuristics import gender_group, is_high_quality
from ..search.types import VoiceCandidate
from ..session.types import Session
from .labels import get_labels

LIBRARY_URL = "https://elevenlabs.io/app/voice-library?search={}"
BUCKET_CAP = 5
LIST_ALL_CAP = 50
HIGH_QUALITY_CAP = 20
GENDER_ORDER = ("female", "male", "other")
SECTION_ORDER = (("standard", "standard_header"), ("high", "high_header"))


def format_voice_line(voice: VoiceCandidate) -> str:
    url = LIBRARY_URL.format(quote(voice.voice_id, safe=""))
    return f"<{url}|{voice.name}> `{voice.voice_id}`"


def sorted_by_score(voices: List[VoiceCandidate], ranking: Dict[str, float]) -> List[VoiceCandidate]:
    """Best first; sorted() is stable so ties keep input order. Repeated ids are dropped."""
    seen = set()
    unique = []
    for voice in voices:
        if voice.voice_id not in seen:
            seen.add(voice.voice_id)
            unique.append(voice)
    return sorted(unique, key=lambda v: ranking.get(v.voice_id, 0.0), reverse=True)


def bucket_voices(session: Session) -> Dict[str, Dict[str, List[VoiceCandidate]]]:
    """Filtered voices split by quality section and gender group, capped per bucket."""
    filters = session.filters
    cap = LIST_ALL_CAP if filters.list_all else BUCKET_CAP
    sections = {name: {g: [] for g in GENDER_ORDER} for name, _ in SECTION_ORDER}

    for voice in sorted_by_score(session.voices, session.ranking):
        hq = is_high_quality(voice)
        if filters.quality == "high_only" and not hq:
            continue
        if filters.quality == "no_high" and hq:
            continue
        group = gender_group(voice)
        if filters.gender != "any" and group != filters.gender:
            continue
        bucket = sections["high" if hq else "standard"][group]
        if len(bucket) < cap:
            bucket.append(voice)
    return sections


def render_session(session: Session) -> str:
    labels = get_labels(session.ui_language)
    sections = bucket_voices(session)
    gender_filter = session.filters.gender
    order = [gender_filter] if gender_filter in GENDER_ORDER else list(GENDER_ORDER)

    lines = [labels["suggested_header"], ""]
    for name, header_key in SECTION_ORDER:
        lines.append(f"### {labels[header_key]}")
        for group in order:
            lines.append(f"**{labels[group]}:**")
            voices = sections[name][group]
            if voices:
                lines.extend(f"- {format_voice_line(v)}" for v in voices)
            else:
                lines.append(labels["no_voices"])
        lines.append("")

    if gender_filter == "female":
        lines.append(labels["female_filter_footer"])
    elif gender_filter == "male":
        lines.append(labels["male_filter_footer"])
    else:
        lines.append(labels["generic_footer"])
    return "\n".join(lines)


# -------------------------
# Informational replies
# -------------------------
def summarize_languages(voices: List[VoiceCandidate]) -> Dict[str, int]:
    """Voice count per language; verified languages win over the plain field."""
    counts: Dict[str, int] = {}
    for voice in voices:
        langs = [str(e["language"]) for e in voice.verified_languages if e.get("language")]
        if not langs and voice.language:
            langs = [voice.language]
        for lang in dict.fromkeys(langs):
            counts[lang] = counts.get(lang, 0) + 1
    return counts


def render_languages(session: Session) -> str:
    labels = get_labels(session.ui_language)
    counts = summarize_languages(session.voices)
    if not counts:
        return labels["languages_none"]
    lines = [labels["languages_header"]]
    for lang, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
        lines.append(labels["languages_entry"].format(language=lang, count=count))
    return "\n".join(lines)


def render_high_quality(session: Session) -> str:
    labels = get_labels(session.ui_language)
    hq = [v for v in sorted_by_score(session.voices, session.ranking) if is_high_quality(v)]
    if not hq:
        return labels["high_quality_none"]
    lines = [labels["high_quality_header"]]
    lines.extend(f"- {format_voice_line(v)}" for v in hq[:HIGH_QUALITY_CAP])
    return "\n".join(lines)
