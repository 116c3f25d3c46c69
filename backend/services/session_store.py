import logging
import time
import uuid

from config import settings
from views.country_list import CountryListView, Fetcher

logger = logging.getLogger(__name__)


class SessionStore:
    """Live view sessions keyed by id, torn down after a TTL."""

    def __init__(self, ttl: int | None = None, fetcher: Fetcher | None = None):
        self._store: dict[str, tuple[CountryListView, float]] = {}
        self._ttl = ttl or settings.session_ttl_seconds
        self._fetcher = fetcher

    def __len__(self) -> int:
        return len(self._store)

    async def create(self) -> tuple[str, CountryListView]:
        await self.expire()
        view = CountryListView(fetcher=self._fetcher)
        view.start()
        session_id = uuid.uuid4().hex
        self._store[session_id] = (view, time.time())
        logger.debug("Created view session %s", session_id)
        return session_id, view

    async def get(self, session_id: str) -> CountryListView | None:
        await self.expire()
        entry = self._store.get(session_id)
        return entry[0] if entry else None

    async def remove(self, session_id: str) -> bool:
        entry = self._store.pop(session_id, None)
        if entry is None:
            return False
        await entry[0].close()
        logger.debug("Closed view session %s", session_id)
        return True

    async def expire(self) -> int:
        now = time.time()
        stale = [k for k, (_, ts) in self._store.items() if now - ts >= self._ttl]
        for key in stale:
            await self.remove(key)
        if stale:
            logger.info("Expired %d view session(s)", len(stale))
        return len(stale)

    async def close_all(self) -> None:
        for key in list(self._store):
            await self.remove(key)


sessions = SessionStore()
