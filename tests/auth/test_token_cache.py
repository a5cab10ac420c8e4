import asyncio
import pytest

from nordigen_sync.auth.token_cache import AccessTokenCache


@pytest.fixture
def token_cache():
    """Create an empty token cache."""
    return AccessTokenCache()


class TestAccessTokenCache:

    def test_starts_empty(self, token_cache):
        """Test that no token is cached at start."""
        assert token_cache.token is None

    @pytest.mark.asyncio
    async def test_fetches_once_and_caches(self, token_cache):
        """Test that the token is fetched on first use and reused afterwards."""
        calls = []

        async def fetch():
            calls.append(1)
            return "token123"

        assert await token_cache.get_token(fetch) == "token123"
        assert await token_cache.get_token(fetch) == "token123"
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_single_fetch(self, token_cache):
        """Test that concurrent first-time callers trigger exactly one fetch."""
        calls = []

        async def fetch():
            calls.append(1)
            await asyncio.sleep(0.01)
            return f"token{len(calls)}"

        results = await asyncio.gather(*(token_cache.get_token(fetch) for _ in range(10)))

        assert len(calls) == 1
        assert results == ["token1"] * 10

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_failed_fetch(self, token_cache):
        """Test that concurrent callers see one failure instead of refetching."""
        calls = []

        async def failing_fetch():
            calls.append(1)
            await asyncio.sleep(0.01)
            raise RuntimeError("token endpoint down")

        results = await asyncio.gather(
            *(token_cache.get_token(failing_fetch) for _ in range(5)),
            return_exceptions=True,
        )

        assert len(calls) == 1
        assert all(isinstance(result, RuntimeError) for result in results)
        assert token_cache.token is None

        async def fetch():
            calls.append(1)
            return "token123"

        assert await token_cache.get_token(fetch) == "token123"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_failed_fetch_is_not_cached(self, token_cache):
        """Test that a failing fetch propagates and leaves the cache empty."""

        async def failing_fetch():
            raise RuntimeError("token endpoint down")

        async def fetch():
            return "token123"

        with pytest.raises(RuntimeError):
            await token_cache.get_token(failing_fetch)

        assert token_cache.token is None
        assert await token_cache.get_token(fetch) == "token123"

    @pytest.mark.asyncio
    async def test_reset(self, token_cache):
        """Test that reset forces a new fetch."""
        tokens = iter(["first", "second"])

        async def fetch():
            return next(tokens)

        assert await token_cache.get_token(fetch) == "first"
        token_cache.reset()
        assert token_cache.token is None
        assert await token_cache.get_token(fetch) == "second"
