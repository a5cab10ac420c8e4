"""Service layer for the Nordigen sync core."""

from nordigen_sync.services.nordigen_service import NordigenService

__all__ = ["NordigenService"]
