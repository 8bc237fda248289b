"""In-process registry of open import sessions."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from ...core.exceptions import ImportSessionNotFoundError
from ...core.logging import get_logger
from ...core.utils import utc_now
from .session import ImportSession, ImportStage

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionOwner:
    account_id: int
    company_id: int
    user_id: int


@dataclass
class _Entry:
    owner: SessionOwner
    session: ImportSession
    touched_at: datetime = field(default_factory=utc_now)


class ImportSessionRegistry:
    """Sessions are visible only to the user that created them.

    Idle sessions are evicted after ``ttl``; a session that is importing is
    never evicted.
    """

    def __init__(self, ttl: timedelta):
        self.ttl = ttl
        self._entries: dict[UUID, _Entry] = {}

    def add(self, owner: SessionOwner, session: ImportSession) -> ImportSession:
        self.purge_expired()
        self._entries[session.id] = _Entry(owner=owner, session=session)
        return session

    def get(self, session_id: UUID, owner: SessionOwner) -> ImportSession:
        self.purge_expired()
        entry = self._entries.get(session_id)
        if entry is None or entry.owner != owner:
            raise ImportSessionNotFoundError(session_id)
        entry.touched_at = utc_now()
        return entry.session

    def discard(self, session_id: UUID, owner: SessionOwner) -> ImportSession:
        session = self.get(session_id, owner)
        session.reset()
        del self._entries[session_id]
        return session

    def purge_expired(self, now: datetime | None = None) -> int:
        now = now or utc_now()
        expired = [
            session_id
            for session_id, entry in self._entries.items()
            if entry.session.stage is not ImportStage.IMPORTING
            and now - entry.touched_at > self.ttl
        ]
        for session_id in expired:
            del self._entries[session_id]
        if expired:
            logger.debug("Evicted %d idle import session(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
