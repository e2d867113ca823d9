# One place to set up log output for the app and the dev server.

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_configured = False


def configure_logging(level: Optional[str] = None, *, force: bool = False) -> None:
    """Install the root handler once; later calls are no-ops unless ``force``.

    ``level`` is a level name such as settings.LOG_LEVEL; unknown names mean INFO.
    """
    global _configured
    if _configured and not force:
        return

    resolved = logging.getLevelName((level or "INFO").strip().upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=force)
    logging.getLogger("voicefinder").setLevel(resolved)
    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(max(resolved, logging.WARNING))
    _configured = True
