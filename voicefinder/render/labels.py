# Localized label strings, loaded once from labels.yaml next to this file.

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict, Optional

import yaml

LABELS_PATH = os.path.join(os.path.dirname(__file__), "labels.yaml")
BASE_LANGUAGE = "en"


@lru_cache(maxsize=1)
def load_label_table(path: str = LABELS_PATH) -> Dict[str, Dict[str, str]]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"labels.yaml not found at {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if BASE_LANGUAGE not in data:
        raise KeyError(f"labels.yaml has no '{BASE_LANGUAGE}' section")
    return data


def get_labels(language: Optional[str] = None) -> Dict[str, str]:
    """Labels for ``language``; unknown languages and missing keys fall back to English."""
    table = load_label_table()
    labels = dict(table[BASE_LANGUAGE])
    code = (language or BASE_LANGUAGE).lower()[:2]
    labels.update(table.get(code) or {})
    return labels
