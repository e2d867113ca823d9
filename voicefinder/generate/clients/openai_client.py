# Client for the OpenAI Chat Completions API.
# Same interface as OllamaClient; JSON mode maps to response_format.

from typing import List, Optional, Tuple, Dict, Any
from openai import OpenAI
from ..types import Message, ModelParams


class OpenAIClient:
    def __init__(self, model: str = "gpt-4o-mini", api_key: Optional[str] = None):
        self.model = model
        # one attempt per call; the oracle callers fall back on failure
        self.client = OpenAI(api_key=api_key, max_retries=0)

    def set_model(self, model: str):
        self.model = model

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        formatted = [{"role": m.role, "content": m.content} for m in messages]
        kwargs: Dict[str, Any] = {}
        if params.json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if params.timeout:
            kwargs["timeout"] = params.timeout
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=formatted,
            temperature=params.temperature if params.temperature is not None else 0.0,
            max_tokens=params.max_tokens or 1000,
            **kwargs,
        )
        text = (resp.choices[0].message.content or "").strip()
        meta = {"engine": "openai", "model": self.model}
        return text, meta
