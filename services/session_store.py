"""
In-memory session store with idle expiry and periodic cleanup
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from core.exceptions import SessionNotFoundError
from models.session import RegistrationStats, UserSession

logger = logging.getLogger(__name__)


class SessionStore:
    """One active registration session per user"""

    def __init__(self, idle_timeout: timedelta = timedelta(hours=24),
                 clock: Callable[[], datetime] = datetime.now):
        self.idle_timeout = idle_timeout
        self.clock = clock
        self.stats = RegistrationStats()

        self._sessions: Dict[int, UserSession] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._cleanup_task: Optional[asyncio.Task] = None

        logger.info(f"✅ SessionStore initialized (idle timeout {idle_timeout})")

    # -------------------------------------------------
    # CRUD
    # -------------------------------------------------
    def create(self, user_id: int, chat_id: int) -> UserSession:
        """Start a fresh session, replacing any existing one"""
        now = self.clock()
        if user_id in self._sessions:
            logger.info(f"♻️ Replacing session of user {user_id}")
        session = UserSession(user_id=user_id, chat_id=chat_id, created_at=now, last_activity_at=now)
        self._sessions[user_id] = session
        self.stats.sessions_started += 1
        return session

    def get(self, user_id: int) -> Optional[UserSession]:
        """Active session of the user, or None if absent or idle too long"""
        session = self._sessions.get(user_id)
        if session is None:
            return None
        if self._is_expired(session):
            self._evict(user_id)
            return None
        return session

    def update(self, user_id: int, mutator: Callable[[UserSession], None]) -> UserSession:
        session = self.get(user_id)
        if session is None:
            raise SessionNotFoundError(user_id)
        mutator(session)
        session.touch(self.clock())
        return session

    def destroy(self, user_id: int) -> bool:
        return self._sessions.pop(user_id, None) is not None

    # -------------------------------------------------
    # Concurrency
    # -------------------------------------------------
    def user_lock(self, user_id: int) -> asyncio.Lock:
        """Lock serializing every event of one user"""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    # -------------------------------------------------
    # Cleanup
    # -------------------------------------------------
    async def sweep(self) -> int:
        """Evict idle sessions; a user with an event in flight is skipped"""
        expired = []
        for user_id, session in list(self._sessions.items()):
            lock = self._locks.get(user_id)
            if lock is not None and lock.locked():
                continue
            if self._is_expired(session):
                expired.append(user_id)

        for user_id in expired:
            self._evict(user_id)

        # drop locks nobody is holding and no session needs
        for user_id, lock in list(self._locks.items()):
            if user_id not in self._sessions and not lock.locked():
                del self._locks[user_id]

        if expired:
            logger.info(f"🗑️ Cleaned up {len(expired)} idle sessions")
        return len(expired)

    def start_cleanup(self, interval: timedelta = timedelta(minutes=30)) -> asyncio.Task:
        """Run sweep() every ``interval`` in the background"""
        async def cleanup_loop():
            while True:
                await asyncio.sleep(interval.total_seconds())
                try:
                    await self.sweep()
                except Exception as e:
                    logger.error(f"Error in cleanup loop: {e}")

        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.create_task(cleanup_loop())
            logger.info(f"🧹 Session cleanup every {interval}")
        return self._cleanup_task

    async def stop_cleanup(self) -> None:
        task, self._cleanup_task = self._cleanup_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("🧹 Session cleanup stopped")

    # -------------------------------------------------
    # Introspection
    # -------------------------------------------------
    def get_session_count(self) -> int:
        return len(self._sessions)

    def _is_expired(self, session: UserSession) -> bool:
        return session.idle_for(self.clock()) > self.idle_timeout.total_seconds()

    def _evict(self, user_id: int) -> None:
        if self._sessions.pop(user_id, None) is not None:
            self.stats.expired += 1
            logger.info(f"⌛ Session of user {user_id} expired")
