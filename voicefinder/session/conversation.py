# Per-thread conversation handling.
#
# no session      -> any message runs a new search
# active session  -> languages summary | which are high quality | filter change
#                    (in that precedence); anything else is a new search that
#                    replaces the session
#
# Messages of one thread are serialized through the store's per-thread lock.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..render.labels import get_labels
from ..render.presenter import render_high_quality, render_languages, render_session
from ..search.pipeline import SearchPipeline
from ..transport import TransportError, clean_text
from .intents import (
    apply_filter_changes,
    detect_filter_changes,
    normalize_text,
    wants_high_quality_list,
    wants_languages_summary,
)
from .store import RecentRequests, SessionStore
from .types import Session

logger = logging.getLogger(__name__)


@dataclass
class MentionEvent:
    """One inbound mention from the chat platform."""
    text: str
    channel: str
    ts: str
    thread_ts: Optional[str] = None

    @property
    def thread_id(self) -> str:
        return self.thread_ts or self.ts


class ConversationHandler:
    def __init__(self, pipeline: SearchPipeline, store: SessionStore, transport,
                 recent: Optional[RecentRequests] = None, default_language: str = "en",
                 acknowledge: bool = True):
        self.pipeline = pipeline
        self.store = store
        self.transport = transport
        self.recent = recent
        self.default_language = default_language
        self.acknowledge = acknowledge

    # -------------------------
    # Public API
    # -------------------------
    def handle(self, event: MentionEvent) -> List[str]:
        """Process one mention; returns the replies posted, in order."""
        text = clean_text(event.text)
        thread_id = event.thread_id
        if not text:
            return []
        if self.recent is not None and self.recent.is_duplicate(thread_id, text):
            logger.info("thread %s: duplicate delivery dropped", thread_id)
            return []

        replies: List[str] = []

        def reply(message: str) -> None:
            replies.append(message)
            self._post(event.channel, thread_id, message)

        with self.store.lock(thread_id):
            session = self.store.get(thread_id)
            if session is None or not self._follow_up(session, text, reply):
                self._new_search(text, thread_id, reply)
        return replies

    # -------------------------
    # Transitions
    # -------------------------
    def _follow_up(self, session: Session, text: str, reply) -> bool:
        """Answer from the stored shortlist; False when the text is a new brief."""
        lower = normalize_text(text)

        if wants_languages_summary(lower):
            reply(render_languages(session))
            return True

        if wants_high_quality_list(lower):
            reply(render_high_quality(session))
            return True

        changes = detect_filter_changes(lower)
        if apply_filter_changes(session.filters, changes):
            logger.info("thread %s: filters now %s", session.thread_id, session.filters)
            reply(render_session(session))
            return True

        return False

    def _new_search(self, text: str, thread_id: str, reply) -> None:
        def on_planned(plan) -> None:
            if self.acknowledge:
                reply(get_labels(plan.interface_language)["searching"])

        try:
            outcome = self.pipeline.run(text, thread_id, on_planned=on_planned)
        except Exception:
            logger.exception("thread %s: search pipeline failed", thread_id)
            reply(get_labels(self.default_language)["generic_error"])
            return

        if not outcome.found:
            logger.info("thread %s: no candidates for %r", thread_id, text)
            reply(get_labels(outcome.ui_language)["no_results"])
            return

        self.store.put(outcome.session)
        reply(render_session(outcome.session))

    def _post(self, channel: str, thread_id: str, message: str) -> None:
        try:
            self.transport.post_message(channel, thread_id, message)
        except TransportError as e:
            logger.error("thread %s: reply not delivered: %s", thread_id, e)
