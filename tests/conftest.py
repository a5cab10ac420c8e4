import pytest

from nordigen_sync.auth.token_cache import access_token_cache


@pytest.fixture(autouse=True)
def reset_access_token():
    """Start every test without a cached access token."""
    access_token_cache.reset()
    yield
    access_token_cache.reset()
