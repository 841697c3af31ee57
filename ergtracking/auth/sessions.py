"""Server-side session store mapping opaque session ids to identities."""

import secrets
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

from ergtracking.auth.models import Identity
from ergtracking.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LIFETIME = timedelta(days=7)


@dataclass(frozen=True)
class SessionRecord:
    """Identity attached to a session and the moment the session ends."""

    identity: Identity
    expires_at: float


class SessionStore:
    """In-process session backend with a fixed expiry from issuance.

    Sessions are not extended by activity. Expired sessions are dropped
    when looked up and swept whenever a new session is created.
    """

    def __init__(
        self,
        lifetime: timedelta = DEFAULT_LIFETIME,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize session store.

        Args:
            lifetime: How long a session stays valid after creation
            clock: Source of the current time in seconds
        """
        self.lifetime = lifetime
        self._clock = clock
        self._sessions: dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, identity: Identity) -> str:
        """Open a new session for an identity.

        Args:
            identity: Authenticated identity

        Returns:
            Opaque session id to hand to the client
        """
        session_id = secrets.token_urlsafe(32)
        now = self._clock()
        record = SessionRecord(identity=identity, expires_at=now + self.lifetime.total_seconds())

        with self._lock:
            self._sweep(now)
            self._sessions[session_id] = record

        logger.debug("session_created", user_id=identity.id)
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[Identity]:
        """Return the identity of a live session, or None."""
        if not session_id:
            return None

        with self._lock:
            record = self._sessions.get(session_id)
            if record is None:
                return None
            if record.expires_at <= self._clock():
                del self._sessions[session_id]
                logger.debug("session_expired", user_id=record.identity.id)
                return None
            return record.identity

    def destroy(self, session_id: Optional[str]) -> bool:
        """Invalidate a session. Unknown or missing ids are ignored.

        Returns:
            True if a session was removed
        """
        if not session_id:
            return False

        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def _sweep(self, now: float) -> None:
        expired = [sid for sid, record in self._sessions.items() if record.expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("sessions_swept", count=len(expired))
