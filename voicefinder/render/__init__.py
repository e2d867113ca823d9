# Text rendering of shortlists and localized labels.

from .labels import get_labels
from .presenter import render_high_quality, render_languages, render_session

__all__ = ["get_labels", "render_high_quality", "render_languages", "render_session"]
