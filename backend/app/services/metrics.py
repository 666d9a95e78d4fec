"""In-memory fileserver hit counter."""

from __future__ import annotations

import threading


class FileserverMetrics:
    """Thread-safe hit counter; one instance lives on ``app.state``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hits = 0

    def increment(self) -> int:
        with self._lock:
            self._hits += 1
            return self._hits

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    def reset(self) -> None:
        with self._lock:
            self._hits = 0


ADMIN_METRICS_TEMPLATE = (
    "<html>\n"
    "  <body>\n"
    "    <h1>Welcome, Chirpy Admin</h1>\n"
    "    <p>Chirpy has been visited {hits} times!</p>\n"
    "  </body>\n"
    "</html>"
)


def render_admin_metrics(hits: int) -> str:
    return ADMIN_METRICS_TEMPLATE.format(hits=hits)
