"""Nordigen sync core

Bank account, balance and transaction aggregation through the Nordigen
(GoCardless Bank Account Data) API:
- Typed mapping of API failures
- Per-institution bank adapters with a shared default
- Requisition, account and transaction orchestration with balance
  reconciliation
"""

__version__ = "0.1.0"

from nordigen_sync.config.logging import setup_logging, get_logger

__all__ = ["setup_logging", "get_logger", "__version__"]
