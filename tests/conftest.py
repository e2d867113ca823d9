import json
import sys
from pathlib import Path
from typing import Callable, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from voicefinder.generate import JsonOracle
from voicefinder.search.catalog import CatalogError
from voicefinder.search.pipeline import SearchPipeline
from voicefinder.session import InMemorySessionStore
from voicefinder.session.conversation import ConversationHandler
from voicefinder.transport import RecordingTransport


def make_voice(voice_id: str, **fields) -> dict:
    """Raw shared-voices record with sensible defaults."""
    record = {
        "voice_id": voice_id,
        "name": fields.pop("name", f"Voice {voice_id}"),
        "language": "en",
        "gender": "female",
        "category": "professional",
        "usage_character_count_7d": 0,
    }
    record.update(fields)
    return record


class FakeCatalog:
    """Catalog double: ``responder(query)`` returns records or raises CatalogError."""

    def __init__(self, responder: Optional[Callable] = None, similar: Optional[List[dict]] = None,
                 known: Optional[dict] = None):
        self.responder = responder or (lambda query: [])
        self.similar = similar or []
        self.known = known or {}
        self.queries = []
        self.downloads = []

    def search(self, query):
        self.queries.append(query)
        return self.responder(query)

    def find_voice(self, voice_id):
        return self.known.get(voice_id)

    def download(self, url):
        self.downloads.append(url)
        return b"mp3-bytes"

    def similar_voices(self, audio, filename="sample.mp3"):
        return list(self.similar)


class FakeModelClient:
    """Model client double answering from a list of canned replies (str, dict or Exception)."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []
        self.model = "fake"

    def generate(self, messages, params):
        self.calls.append(messages)
        reply = self.replies.pop(0) if self.replies else "{}"
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return reply, {"engine": "fake", "model": self.model}


def failing(query):
    raise CatalogError("boom")


@pytest.fixture
def planner_client():
    return FakeModelClient()


@pytest.fixture
def ranker_client():
    return FakeModelClient()


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def handler(catalog, planner_client, ranker_client, store, transport):
    pipeline = SearchPipeline(catalog, JsonOracle(planner_client), JsonOracle(ranker_client))
    return ConversationHandler(pipeline=pipeline, store=store, transport=transport, acknowledge=False)
