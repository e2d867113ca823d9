# ============================================================
# Voice Finder FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Planner / curator oracles over Ollama, OpenAI, or Echo clients
#   - ElevenLabs shared voice library as the catalog
#   - Per-thread sessions and follow-up handling
#   - Slack (or in-memory) transport for replies
# ============================================================

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from functools import lru_cache
import logging

# --- Local imports ---
from voicefinder.settings import settings
from voicefinder.logging_config import configure_logging
from voicefinder.generate import JsonOracle
from voicefinder.generate.clients.echo_dev_client import EchoDevClient
from voicefinder.search import VoiceCatalog
from voicefinder.search.pipeline import SearchPipeline
from voicefinder.session import InMemorySessionStore, RecentRequests
from voicefinder.session.conversation import ConversationHandler, MentionEvent
from voicefinder.transport import RecordingTransport, SlackTransport

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# 🔧 Model client selection
# ------------------------------------------------------------
def build_model_client(model: str):
    """One client per oracle so each keeps its own model name."""
    if settings.USE_OLLAMA:
        from voicefinder.generate.clients.ollama_client import OllamaClient
        return OllamaClient(model=settings.OLLAMA_MODEL, host=settings.OLLAMA_HOST)
    if settings.OPENAI_API_KEY:
        from voicefinder.generate.clients.openai_client import OpenAIClient
        return OpenAIClient(model=model, api_key=settings.OPENAI_API_KEY)
    return EchoDevClient()


def build_transport():
    if settings.SLACK_BOT_TOKEN:
        return SlackTransport(token=settings.SLACK_BOT_TOKEN)
    return RecordingTransport()


# ------------------------------------------------------------
# 🧠 Handler wiring
# ------------------------------------------------------------
@lru_cache(maxsize=1)
def get_handler() -> ConversationHandler:
    catalog = VoiceCatalog(
        api_key=settings.ELEVENLABS_API_KEY,
        base_url=settings.ELEVENLABS_BASE_URL,
        timeout=settings.CATALOG_TIMEOUT,
    )
    planner = JsonOracle(build_model_client(settings.OPENAI_PLANNER_MODEL), timeout=settings.PLANNER_TIMEOUT)
    ranker = JsonOracle(build_model_client(settings.OPENAI_RANKER_MODEL), timeout=settings.RANKER_TIMEOUT)
    pipeline = SearchPipeline(catalog, planner, ranker, default_language=settings.DEFAULT_LANGUAGE)
    handler = ConversationHandler(
        pipeline=pipeline,
        store=InMemorySessionStore(),
        transport=build_transport(),
        recent=RecentRequests(window=settings.DUPLICATE_WINDOW_SECONDS),
        default_language=settings.DEFAULT_LANGUAGE,
    )
    logger.info(
        "handler ready: oracle=%s transport=%s",
        type(planner.model_client).__name__,
        type(handler.transport).__name__,
    )
    return handler


# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="Voice Finder API", version="0.3")


# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class MentionRequest(BaseModel):
    text: str
    channel: str
    ts: str
    thread_ts: Optional[str] = None


class MentionResponse(BaseModel):
    thread_id: str
    replies: List[str]


class SlackEnvelope(BaseModel):
    type: str
    challenge: Optional[str] = None
    event: Optional[Dict[str, Any]] = None


# ------------------------------------------------------------
# 💬 Mention route (direct)
# ------------------------------------------------------------
@app.post("/mention", response_model=MentionResponse)
def mention(req: MentionRequest, handler: ConversationHandler = Depends(get_handler)):
    event = MentionEvent(text=req.text, channel=req.channel, ts=req.ts, thread_ts=req.thread_ts)
    try:
        replies = handler.handle(event)
    except Exception as e:
        logger.exception("mention handling failed")
        raise HTTPException(status_code=500, detail=str(e))
    return MentionResponse(thread_id=event.thread_id, replies=replies)


# ------------------------------------------------------------
# 📨 Slack Events API
# ------------------------------------------------------------
def _handle_in_background(handler: ConversationHandler, event: MentionEvent) -> None:
    try:
        handler.handle(event)
    except Exception:
        logger.exception("background mention handling failed")


@app.post("/slack/events")
def slack_events(
    envelope: SlackEnvelope,
    background: BackgroundTasks,
    handler: ConversationHandler = Depends(get_handler),
):
    if envelope.type == "url_verification":
        return {"challenge": envelope.challenge}

    event = envelope.event or {}
    if envelope.type == "event_callback" and event.get("type") == "app_mention":
        mention_event = MentionEvent(
            text=event.get("text") or "",
            channel=event.get("channel") or "",
            ts=event.get("ts") or "",
            thread_ts=event.get("thread_ts"),
        )
        # Slack wants an answer within seconds; the search runs afterwards
        background.add_task(_handle_in_background, handler, mention_event)
    return {"ok": True}


# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.app_name,
    }


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}


@app.get("/")
def hello():
    return {"message": "Voice Finder service running."}
