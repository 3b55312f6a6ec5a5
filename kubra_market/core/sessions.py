# kubra_market/core/sessions.py
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from kubra_market.core import security
from kubra_market.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    merchant_id: int
    expires_at: datetime


class SessionStore:
    """
    Maps a session id to a merchant id for a fixed time-to-live.

    The cookie only carries a signed token naming the session id, so logging
    out (or expiring here) kills the session even while the token signature
    is still valid.
    """

    def __init__(self, ttl: Optional[timedelta] = None):
        self.ttl = ttl or timedelta(days=settings.SESSION_EXPIRE_DAYS)
        self._entries: Dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def create(self, merchant_id: int) -> str:
        """Open a session and return the signed cookie token for it."""
        session_id = security.new_session_id()
        now = datetime.now(timezone.utc)
        expires_at = now + self.ttl
        with self._lock:
            self._purge_expired(now)
            self._entries[session_id] = SessionEntry(merchant_id=merchant_id, expires_at=expires_at)
        return security.create_session_token(merchant_id, session_id, expires_delta=self.ttl)

    def _purge_expired(self, now: datetime) -> None:
        # Caller holds the lock
        expired = [sid for sid, e in self._entries.items() if e.expires_at <= now]
        for sid in expired:
            del self._entries[sid]

    def count(self) -> int:
        """Entries held, expired ones not yet purged included."""
        with self._lock:
            return len(self._entries)

    def resolve(self, token: Optional[str]) -> Optional[int]:
        """Merchant id for a cookie token, or None when unauthenticated."""
        if not token:
            return None
        payload = security.decode_session_token(token)
        if not payload:
            return None

        session_id = payload.get("sid")
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            if entry.expires_at <= datetime.now(timezone.utc):
                del self._entries[session_id]
                return None

        if str(entry.merchant_id) != payload.get("sub"):
            logger.warning("Session %s token subject mismatch", session_id)
            return None
        return entry.merchant_id

    def invalidate(self, token: Optional[str]) -> None:
        if not token:
            return
        payload = security.decode_session_token(token)
        if not payload:
            return
        with self._lock:
            self._entries.pop(payload.get("sid"), None)

    def invalidate_merchant(self, merchant_id: int) -> None:
        """Drop every session of a merchant (account deleted)."""
        with self._lock:
            stale = [sid for sid, e in self._entries.items() if e.merchant_id == merchant_id]
            for sid in stale:
                del self._entries[sid]
