# Chat transports: where replies go.
#  - SlackTransport posts into a Slack thread via chat.postMessage
#  - RecordingTransport keeps replies in memory (local dev and tests)

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

SLACK_POST_URL = "https://slack.com/api/chat.postMessage"
MAX_BLOCK_CHARS = 2800
MAX_BLOCKS = 50

_MENTION_RE = re.compile(r"<@[^>]+>")
_LEADING_PUNCT_RE = re.compile(r"^[\s,;:\-–—\"“”'`]+")


class TransportError(Exception):
    """A reply could not be delivered."""


def clean_text(text: Optional[str]) -> str:
    """Strip user mentions like <@U123ABC> and leading punctuation."""
    if not text:
        return ""
    return _LEADING_PUNCT_RE.sub("", _MENTION_RE.sub("", text).strip())


def build_blocks(text: str) -> List[Dict[str, Any]]:
    """Split text into mrkdwn sections (per blank-line paragraph) with dividers."""
    blocks: List[Dict[str, Any]] = []
    if not text:
        return blocks

    def section(body: str) -> Dict[str, Any]:
        return {"type": "section", "text": {"type": "mrkdwn", "text": body}}

    for part in re.split(r"\n\s*\n", text):
        buffer = ""
        for line in part.split("\n"):
            candidate = f"{buffer}\n{line}" if buffer else line
            if len(candidate) > MAX_BLOCK_CHARS and buffer:
                blocks.append(section(buffer))
                buffer = line
            else:
                buffer = candidate
        if buffer.strip():
            blocks.append(section(buffer[:MAX_BLOCK_CHARS]))
        blocks.append({"type": "divider"})

    blocks = blocks[:MAX_BLOCKS]
    while blocks and blocks[-1]["type"] == "divider":
        blocks.pop()
    return blocks


class SlackTransport:
    def __init__(self, token: str, timeout: float = 10.0):
        self.token = token
        self.timeout = timeout
        self._session = requests.Session()

    def post_message(self, channel: str, thread_ts: str, text: str) -> None:
        payload = {"channel": channel, "thread_ts": thread_ts, "text": text}
        blocks = build_blocks(text)
        if blocks:
            payload["blocks"] = blocks
        try:
            resp = self._session.post(
                SLACK_POST_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise TransportError(f"chat.postMessage failed: {e}") from e
        if not data.get("ok"):
            raise TransportError(f"chat.postMessage rejected: {data.get('error', 'unknown error')}")


@dataclass
class PostedMessage:
    channel: str
    thread_ts: str
    text: str


class RecordingTransport:
    def __init__(self):
        self.messages: List[PostedMessage] = []
        self._lock = threading.Lock()

    def post_message(self, channel: str, thread_ts: str, text: str) -> None:
        with self._lock:
            self.messages.append(PostedMessage(channel=channel, thread_ts=thread_ts, text=text))
        logger.debug("recorded reply for %s/%s (%d chars)", channel, thread_ts, len(text))

    def texts(self, thread_ts: Optional[str] = None) -> List[str]:
        return [m.text for m in self.messages if thread_ts is None or m.thread_ts == thread_ts]
