"""
Session ownership of notification centers.

Each active dashboard session gets its own center and scheduler job. The
job is added when the session is opened and removed when the session is
closed (logout, explicit teardown, idle timeout, process shutdown).

Sessions live in process memory. The registry assumes one server process:
under several workers each process keeps its own sessions, logs and read
state.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

from django.conf import settings

from .center import NotificationCenter
from .scheduler import AlertScheduler, create_background_scheduler

logger = logging.getLogger(__name__)

IDLE_SWEEP_SECONDS = 60


def session_key_for_user(user):
    return f"user:{user.pk}"


def idle_timeout_seconds() -> float:
    """Idle limit for a session, defaulting to the JWT access token lifetime"""
    idle = settings.STOCK_ALERTS.get('SESSION_IDLE_SECONDS')
    if idle is None:
        idle = settings.SIMPLE_JWT['ACCESS_TOKEN_LIFETIME'].total_seconds()
    return idle


@dataclass
class AlertSession:
    key: str
    center: NotificationCenter
    scheduler: AlertScheduler
    last_access: float = 0.0


class AlertSessionRegistry:
    """Maps session keys to their center and scheduler job"""

    def __init__(self, source_factory=None, clock=time.monotonic):
        self._source_factory = source_factory
        self._clock = clock
        self._sessions: Dict[str, AlertSession] = {}
        self._lock = threading.Lock()
        self._scheduler = None

    def _background_scheduler(self):
        # Caller holds self._lock
        if self._scheduler is None:
            self._scheduler = create_background_scheduler()
            self._scheduler.add_job(
                self.close_idle,
                'interval',
                seconds=IDLE_SWEEP_SECONDS,
                id='stock-alerts-idle-sweep',
                name='stock-alerts-idle-sweep',
            )
            self._scheduler.start()
            logger.info("Stock alert background scheduler started")
        return self._scheduler

    def open(self, key: str) -> AlertSession:
        """Return the session for ``key``, creating and starting it on first use.

        Every call counts as activity and pushes back the idle timeout.
        """
        self.close_idle()
        with self._lock:
            now = self._clock()
            session = self._sessions.get(key)
            if session is not None:
                session.last_access = now
                return session
            config = settings.STOCK_ALERTS
            autostart = config.get('AUTOSTART', True)
            source = self._source_factory() if self._source_factory else None
            center = NotificationCenter(source=source, limit=config.get('LOG_LIMIT', 50))
            scheduler = AlertScheduler(
                center,
                interval=config.get('INTERVAL_SECONDS', 300),
                name=f"stock-alerts[{key}]",
                scheduler=self._background_scheduler() if autostart else None,
            )
            session = AlertSession(key=key, center=center, scheduler=scheduler, last_access=now)
            self._sessions[key] = session

        if autostart:
            scheduler.start()
        logger.info(f"Opened stock alert session {key}")
        return session

    def get(self, key: str) -> Optional[AlertSession]:
        with self._lock:
            return self._sessions.get(key)

    def close(self, key: str) -> bool:
        """Stop and forget the session. Returns False when it was not open."""
        with self._lock:
            session = self._sessions.pop(key, None)
        if session is None:
            return False
        session.scheduler.stop()
        logger.info(f"Closed stock alert session {key}")
        return True

    def close_idle(self) -> int:
        """Close every session not opened within the idle timeout. Returns how many were closed."""
        idle_seconds = idle_timeout_seconds()
        with self._lock:
            cutoff = self._clock() - idle_seconds
            stale = [key for key, session in self._sessions.items() if session.last_access < cutoff]
            expired = [self._sessions.pop(key) for key in stale]
        for session in expired:
            session.scheduler.stop(wait=False)
            logger.info(f"Closed stock alert session {session.key} after {idle_seconds:.0f}s idle")
        return len(expired)

    def close_all(self) -> None:
        with self._lock:
            keys = list(self._sessions)
        for key in keys:
            self.close(key)
        with self._lock:
            scheduler, self._scheduler = self._scheduler, None
        if scheduler is not None and scheduler.running:
            scheduler.shutdown()
            logger.info("Stock alert background scheduler stopped")

    def __len__(self):
        with self._lock:
            return len(self._sessions)


registry = AlertSessionRegistry()
