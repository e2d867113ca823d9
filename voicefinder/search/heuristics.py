# Keyword heuristics over user text and catalog metadata.
# Used whenever the oracles are silent or unreachable, and by the retriever's
# local language/quality filters.

from __future__ import annotations

import re
from typing import Optional

from .types import VoiceCandidate

_POLISH_CHARS = re.compile(r"[ąćęłńóśżź]")
_SPANISH_HINTS = re.compile(r"[¿¡ñ]|\bvoz\b|\bvoces\b")
_GERMAN_HINTS = re.compile(r"[äöüß]|\bstimme\b")

# ordered: the first language whose keywords appear wins
_VOICE_LANGUAGE_KEYWORDS = (
    ("pl", ("polish", "po polsku", "polsk")),
    ("en", ("english", "american accent", "us accent", "british accent", "angielsk")),
    ("es", ("spanish", "español", "espanol", "hiszpań", "hiszpansk")),
    ("de", ("german", "deutsch", "niemieck")),
    ("fr", ("french", "français", "francais", "francus")),
    ("it", ("italian", "italiano", "włoski", "wloski")),
)

# free-text hints looked for in a voice's name/description when its
# language metadata is missing
_METADATA_LANGUAGE_HINTS = {
    "pl": ("polish", "polski"),
    "en": ("english", "angielski", "american", "british"),
    "es": ("spanish", "español", "espanol"),
    "de": ("german", "deutsch"),
    "fr": ("french", "français", "francais"),
    "it": ("italian", "italiano"),
}

_ACCENT_RE = re.compile(
    r"\b(american|british|uk|us|australian|irish|scottish|canadian|polish)\b", re.IGNORECASE
)
_ACCENT_ALIASES = {"uk": "british", "us": "american"}

_FEMALE_RE = re.compile(
    r"\b(female|woman|women|girl|lady|kobiec\w*|kobiet\w*|damsk\w*|femenin\w*|mujer\w*)\b"
)
_MALE_RE = re.compile(
    r"\b(male|man|men|guy|boy|męsk\w*|mesk\w*|mężczyzn\w*|mezczyzn\w*|masculin\w*|hombre\w*)\b"
)

_NO_HIGH_PHRASES = (
    "no high quality",
    "without high quality",
    "exclude high quality",
    "standard only",
    "only standard",
    "bez wysokiej jakości",
    "bez wysokiej jakosci",
    "sin alta calidad",
    "bez hq",
    "no hq",
)
_HIGH_PHRASES = (
    "high quality",
    "high quaility",
    "wysoka jakość",
    "wysokiej jakości",
    "wysoka jakosc",
    "wysokiej jakosci",
    "alta calidad",
)
_HQ_TOKEN = re.compile(r"\bhq\b")
_HQ_TRUE = ("true", "yes", "1")


def guess_ui_language(text: Optional[str]) -> str:
    """Very rough guess of the language the user is typing in."""
    if not text:
        return "en"
    lower = text.lower()
    if _POLISH_CHARS.search(lower) or "głos" in lower or "glos" in lower:
        return "pl"
    if _SPANISH_HINTS.search(lower):
        return "es"
    if _GERMAN_HINTS.search(lower):
        return "de"
    return "en"


def detect_voice_language(text: Optional[str]) -> Optional[str]:
    """Language of the voice the user asks for, when it is named explicitly."""
    if not text:
        return None
    lower = text.lower()
    for code, keywords in _VOICE_LANGUAGE_KEYWORDS:
        if any(k in lower for k in keywords):
            return code
    return None


def detect_accent(text: Optional[str]) -> Optional[str]:
    match = _ACCENT_RE.search(text or "")
    if not match:
        return None
    accent = match.group(1).lower()
    return _ACCENT_ALIASES.get(accent, accent)


def detect_gender(text: Optional[str]) -> Optional[str]:
    lower = (text or "").lower()
    female = bool(_FEMALE_RE.search(lower))
    male = bool(_MALE_RE.search(lower))
    if female == male:
        return None
    return "female" if female else "male"


def detect_quality_preference(text: Optional[str]) -> Optional[str]:
    """``no_high`` / ``high_only`` when the text states one explicitly."""
    if not text:
        return None
    lower = text.lower()
    # negations take precedence over any HQ mention
    if any(p in lower for p in _NO_HIGH_PHRASES):
        return "no_high"
    if _HQ_TOKEN.search(lower) or any(p in lower for p in _HIGH_PHRASES):
        return "high_only"
    return None


def normalize_language_code(value) -> Optional[str]:
    """Two-letter lowercase code, or None for anything unusable."""
    if not isinstance(value, str):
        return None
    code = value.strip().lower()[:2]
    if len(code) != 2 or not code.isalpha():
        return None
    return code


# -------------------------
# Catalog metadata
# -------------------------
def _language_matches(field_value: str, code: str) -> bool:
    return field_value == code or field_value.startswith(code + "-") or code in field_value


def is_voice_in_language(voice: VoiceCandidate, code: Optional[str]) -> bool:
    """Language field, verified languages, then free-text hints."""
    if not code:
        return False
    lc = code.lower()

    if voice.language and _language_matches(voice.language.lower(), lc):
        return True

    for entry in voice.verified_languages:
        lang = str(entry.get("language") or "").lower()
        if lang and _language_matches(lang, lc):
            return True

    blob = " ".join(
        part for part in (voice.name, voice.description, voice.descriptive, voice.accent) if part
    ).lower()
    return any(hint in blob for hint in _METADATA_LANGUAGE_HINTS.get(lc, ()))


def _is_hq_category(value) -> bool:
    return str(value or "").lower() in ("high_quality", "high quality")


def _is_hq_label(labels) -> bool:
    return isinstance(labels, dict) and str(labels.get("high_quality") or "").lower() in _HQ_TRUE


def is_high_quality(voice: VoiceCandidate) -> bool:
    if _is_hq_category(voice.category):
        return True
    if _is_hq_category(voice.sharing.get("category")):
        return True
    if voice.high_quality_base_model_ids:
        return True
    if _is_hq_label(voice.labels):
        return True
    return _is_hq_label(voice.sharing.get("labels"))


def gender_group(voice: VoiceCandidate) -> str:
    """``female`` / ``male`` / ``other`` from the explicit field, else labels."""
    raw = str(voice.gender or voice.labels.get("gender") or "").strip().lower()
    if raw in ("female", "woman", "f"):
        return "female"
    if raw in ("male", "man", "m"):
        return "male"
    return "other"


def usage_proxy(voice: VoiceCandidate) -> int:
    """Most recent usage metric available; 0 when the voice has none."""
    for value in (
        voice.usage_character_count_7d,
        voice.usage_character_count_1y,
        voice.cloned_by_count,
    ):
        if value is not None:
            return value
    return 0
