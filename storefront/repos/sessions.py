# storefront/repos/sessions.py
import json
import secrets
import threading
from datetime import datetime, timezone, timedelta
from typing import Callable

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class MemorySessionStore:
    """
    Sesje w pamięci procesu.
    -każda sesja ma datę wygaśnięcia (ttl)
    -przeterminowane wpisy czyszczone co check_period (przy dostępie)
    -przeterminowana sesja nigdy nie jest zwracana
    """

    def __init__(
        self,
        check_period: int,
        ttl: int,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.check_period = timedelta(seconds=check_period)
        self.ttl = timedelta(seconds=ttl)
        self._clock = clock
        self._sessions: dict[str, tuple[dict, datetime]] = {}
        self._lock = threading.RLock()
        self._last_prune = clock()

    def _maybe_prune(self, now: datetime):
        if now - self._last_prune >= self.check_period:
            self._prune(now)

    def _prune(self, now: datetime) -> int:
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        self._last_prune = now
        if expired:
            logger.info(f"Pruned {len(expired)} expired sessions")
        return len(expired)

    def create(self, data: dict) -> str:
        sid = new_session_id()
        self.set(sid, data)
        return sid

    def get(self, sid: str) -> dict | None:
        with self._lock:
            now = self._clock()
            self._maybe_prune(now)
            entry = self._sessions.get(sid)
            if entry is None:
                return None
            data, expires_at = entry
            if expires_at <= now:
                del self._sessions[sid]
                return None
            return dict(data)

    def set(self, sid: str, data: dict):
        with self._lock:
            now = self._clock()
            self._maybe_prune(now)
            self._sessions[sid] = (dict(data), now + self.ttl)

    def destroy(self, sid: str) -> bool:
        with self._lock:
            return self._sessions.pop(sid, None) is not None

    def prune(self) -> int:
        with self._lock:
            return self._prune(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class RedisSessionStore:
    """
    Sesje w Redisie - wygasanie przez EX, Redis sam sprząta klucze.
    """

    def __init__(self, url: str | None = None, ttl: int = 24*60*60, client=None, prefix: str = "sess:"):
        self.redis = client or redis.Redis.from_url(url, decode_responses=True)
        self.ttl = ttl
        self.prefix = prefix

    def _key(self, sid: str) -> str:
        return f"{self.prefix}{sid}"

    def create(self, data: dict) -> str:
        sid = new_session_id()
        self.set(sid, data)
        return sid

    @redis_retry()
    def get(self, sid: str) -> dict | None:
        raw = self.redis.get(self._key(sid))
        if raw is None:
            return None
        return json.loads(raw)

    @redis_retry()
    def set(self, sid: str, data: dict):
        #SET sess:<sid> "{...}" EX <ttl>
        self.redis.set(name=self._key(sid), value=json.dumps(data), ex=self.ttl)

    @redis_retry()
    def destroy(self, sid: str) -> bool:
        return bool(self.redis.delete(self._key(sid)))

    def prune(self) -> int:
        return 0

    @redis_retry()
    def __len__(self) -> int:
        return sum(1 for _ in self.redis.scan_iter(match=f"{self.prefix}*"))
