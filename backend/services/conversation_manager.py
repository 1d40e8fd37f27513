"""Conversation manager for per-tab onboarding sessions."""
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from config import MAX_SESSIONS, SESSION_TTL_SECONDS
from models.conversation import ConversationState

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """One browser tab's conversation and the lock serializing its turns."""
    session_id: str
    state: ConversationState
    created_at: datetime
    last_used: Optional[datetime] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self):
        if self.last_used is None:
            self.last_used = self.created_at


class ConversationManager:
    """Keeps sessions in process memory, dropping idle ones."""

    def __init__(
        self,
        state_factory: Callable[[], ConversationState],
        session_ttl: int = SESSION_TTL_SECONDS,
        max_sessions: int = MAX_SESSIONS,
    ):
        """
        Initialize the conversation manager.

        Args:
            state_factory: Builds the initial state (system turn only) for a new session
            session_ttl: Seconds a session may stay idle before it is dropped
            max_sessions: Most sessions kept at once; the least recently used go first
        """
        self.state_factory = state_factory
        self.session_ttl = timedelta(seconds=session_ttl)
        self.max_sessions = max_sessions
        self._sessions: Dict[str, Session] = {}
        self._registry_lock = threading.Lock()
        logger.info(
            f"ConversationManager initialized (in-memory, ttl={session_ttl}s, max={max_sessions})"
        )

    def get_or_create_session(self, session_id: Optional[str] = None) -> Session:
        """
        Get an existing session or create a new one.

        Args:
            session_id: Optional existing session ID

        Returns:
            Session; a new one is created when the ID is missing, unknown or expired
        """
        now = datetime.now()
        with self._registry_lock:
            self._evict_expired(now)

            if session_id:
                session = self._sessions.get(session_id)
                if session is not None:
                    session.last_used = now
                    return session
                logger.warning(f"Session {session_id} not found, creating new one")

            self._evict_overflow()
            session = Session(
                session_id=self._generate_session_id(),
                state=self.state_factory(),
                created_at=now,
            )
            self._sessions[session.session_id] = session
            logger.info(f"Created new session: {session.session_id}")
            return session

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._registry_lock:
            return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict_expired(self, now: datetime) -> None:
        # Sessions with a turn in flight are never dropped
        expired = [
            sid for sid, session in self._sessions.items()
            if now - session.last_used > self.session_ttl and not session.lock.locked()
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Dropped {len(expired)} idle session(s)")

    def _evict_overflow(self) -> None:
        idle = sorted(
            (s for s in self._sessions.values() if not s.lock.locked()),
            key=lambda s: s.last_used,
        )
        while len(self._sessions) >= self.max_sessions and idle:
            oldest = idle.pop(0)
            del self._sessions[oldest.session_id]
            logger.info(f"Dropped least recently used session: {oldest.session_id}")

    def _generate_session_id(self) -> str:
        """
        Generate a unique session ID.

        Returns:
            Unique session ID string
        """
        return f"sess_{uuid.uuid4().hex[:12]}"
