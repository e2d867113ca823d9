# HTTP client for the ElevenLabs shared voice library.
# One method per endpoint; every failure surfaces as CatalogError so callers
# can treat a failed tier as an empty result.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from .types import SourceTier, VoiceCandidate

logger = logging.getLogger(__name__)

HIGH_QUALITY_CATEGORY = "high_quality"


class CatalogError(Exception):
    """A catalog request failed (network, timeout, HTTP status, bad payload)."""


@dataclass
class CatalogQuery:
    """Parameters of one GET /v1/shared-voices call."""

    page_size: int = 40
    search: Optional[str] = None
    language: Optional[str] = None
    accent: Optional[str] = None
    gender: Optional[str] = None
    use_cases: List[str] = field(default_factory=list)
    descriptives: List[str] = field(default_factory=list)
    category: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page_size": self.page_size}
        for key in ("search", "language", "accent", "gender", "category"):
            value = getattr(self, key)
            if value:
                params[key] = value
        # lists are sent as repeated query parameters
        if self.use_cases:
            params["use_cases"] = list(self.use_cases)
        if self.descriptives:
            params["descriptives"] = list(self.descriptives)
        return params


class VoiceCatalog:
    def __init__(self, api_key: Optional[str], base_url: str = "https://api.elevenlabs.io", timeout: float = 10.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["xi-api-key"] = self.api_key
        return headers

    @staticmethod
    def _voices_from(resp: requests.Response) -> List[Dict[str, Any]]:
        try:
            data = resp.json()
        except ValueError as e:
            raise CatalogError("catalog returned non-JSON body") from e
        voices = data.get("voices") if isinstance(data, dict) else None
        if not isinstance(voices, list):
            raise CatalogError("catalog response has no 'voices' list")
        return voices

    # -------------------------
    # Public API
    # -------------------------
    def search(self, query: CatalogQuery) -> List[Dict[str, Any]]:
        """Raw voice records for one shared-voices page."""
        url = f"{self.base_url}/v1/shared-voices"
        try:
            resp = self._session.get(url, params=query.to_params(), headers=self._headers(), timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise CatalogError(f"shared-voices request failed: {e}") from e
        return self._voices_from(resp)

    def find_voice(self, voice_id: str) -> Optional[Dict[str, Any]]:
        """Look a shared voice up by id; exact id match wins over the first hit."""
        voices = self.search(CatalogQuery(page_size=10, search=voice_id))
        if not voices:
            return None
        for voice in voices:
            if isinstance(voice, dict) and voice.get("voice_id") == voice_id:
                return voice
        return voices[0]

    def download(self, url: str) -> bytes:
        try:
            resp = self._session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise CatalogError(f"preview download failed: {e}") from e
        return resp.content

    def similar_voices(self, audio: bytes, filename: str = "sample.mp3") -> List[Dict[str, Any]]:
        """Voices acoustically close to an audio sample (POST /v1/similar-voices)."""
        url = f"{self.base_url}/v1/similar-voices"
        files = {"audio_file": (filename, audio, "audio/mpeg")}
        try:
            resp = self._session.post(url, files=files, headers=self._headers(), timeout=self.timeout * 2)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise CatalogError(f"similar-voices request failed: {e}") from e
        return self._voices_from(resp)

    def close(self):
        self._session.close()


def to_candidates(records: List[Dict[str, Any]], tier: SourceTier) -> List[VoiceCandidate]:
    """Convert raw records, dropping repeats and anything without a voice id."""
    out = []
    seen = set()
    for record in records or []:
        candidate = VoiceCandidate.from_api(record, tier)
        if candidate is None or candidate.voice_id in seen:
            continue
        seen.add(candidate.voice_id)
        out.append(candidate)
    return out
