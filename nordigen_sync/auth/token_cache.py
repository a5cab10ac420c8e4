import asyncio
from typing import Awaitable, Callable, Optional

from nordigen_sync.config.logging import get_logger

logger = get_logger(__name__)


class AccessTokenCache:
    """Process-wide access token with single-flight acquisition.

    The token starts empty and is fetched once by the first caller; callers
    arriving while that fetch is in flight await the same task and share its
    outcome, token or exception. The token then lives until the process exits
    or ``reset`` is called. A failed fetch leaves the cache empty, so a later
    caller starts a new one.
    """

    def __init__(self):
        self._token: Optional[str] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    async def _acquire(self, fetch: Callable[[], Awaitable[str]]) -> str:
        try:
            logger.debug("Fetching access token")
            token = await fetch()
            self._token = token
            logger.info("Access token acquired")
            return token
        finally:
            # A reset during the fetch may already have started another flight
            if self._pending is asyncio.current_task():
                self._pending = None

    async def get_token(self, fetch: Callable[[], Awaitable[str]]) -> str:
        """Return the cached token, fetching it at most once per flight.

        Args:
            fetch: Coroutine function that obtains a new token

        Returns:
            Access token
        """
        if self._token is not None:
            return self._token

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._acquire(fetch))

        # A cancelled waiter must not cancel the fetch the others are awaiting
        return await asyncio.shield(self._pending)

    def reset(self) -> None:
        """Forget the token; the next caller fetches a new one."""
        self._token = None
        self._pending = None


# Global token cache instance
access_token_cache = AccessTokenCache()
