"""Access token handling for the Nordigen API."""

from nordigen_sync.auth.token_cache import AccessTokenCache, access_token_cache

__all__ = ["AccessTokenCache", "access_token_cache"]
