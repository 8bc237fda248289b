"""Bulk resident CSV import.

Upload -> Preview -> Importing -> Done: a CSV of residents is parsed,
matched to registered apartments, reviewed and corrected, then inserted row
by row with per-row failure capture.
"""

from .columns import ImportSchema
from .routers import router, sessions_router
from .session import ImportSession, ImportStage

__all__ = [
    "ImportSchema",
    "ImportSession",
    "ImportStage",
    "router",
    "sessions_router",
]
