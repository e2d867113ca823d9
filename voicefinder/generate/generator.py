# JsonOracle wraps any model client (Ollama, OpenAI, Echo) and turns one
# system prompt + one user payload into a parsed JSON object.
# Both the planning oracle and the ranking oracle go through it.

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from .types import Message, ModelParams

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """The model call failed or did not return a JSON object."""


class JsonOracle:
    def __init__(self, model_client, model: Optional[str] = None, timeout: Optional[float] = None,
                 temperature: float = 0.0, max_tokens: int = 4000):
        self.model_client = model_client
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _compose_messages(self, system_prompt: str, payload: Any) -> list:
        content = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        return [Message(role="system", content=system_prompt.strip()), Message(role="user", content=content)]

    def ask(self, system_prompt: str, payload: Any) -> Dict[str, Any]:
        """Send one request; raise OracleError on any failure."""
        if self.model and hasattr(self.model_client, "set_model"):
            self.model_client.set_model(self.model)

        params = ModelParams(
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=True,
            timeout=self.timeout,
        )
        messages = self._compose_messages(system_prompt, payload)
        try:
            text, meta = self.model_client.generate(messages, params)
        except Exception as e:
            raise OracleError(f"model call failed: {e}") from e

        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise OracleError(f"model returned non-JSON output ({len(text or '')} chars)") from e
        if not isinstance(data, dict):
            raise OracleError(f"model returned {type(data).__name__}, expected object")

        logger.debug("oracle answered via %s", meta)
        return data
