# Dummy model client for local dev and tests without API calls.
# In JSON mode it answers with an object the oracles cannot use, so the
# planner and ranker exercise their heuristic fallbacks.

import json
from typing import List, Tuple, Dict, Any
from ..types import Message, ModelParams


class EchoDevClient:
    def __init__(self):
        self.model = "echo-dev"

    def set_model(self, model: str):
        self.model = model

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        user_inputs = [m.content for m in messages if m.role == "user"]
        last = user_inputs[-1] if user_inputs else "(no user input)"
        text = json.dumps({"echo": last}) if params.json_mode else f"[ECHO RESPONSE]\n{last}"
        meta = {"engine": "echo", "model": self.model, "temp": params.temperature, "max_tokens": params.max_tokens}
        return text, meta
