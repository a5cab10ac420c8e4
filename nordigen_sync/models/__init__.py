"""Data models for the Nordigen sync service."""

from nordigen_sync.models.requests import (
    CreateRequisitionParams,
    TransactionQuery,
)
from nordigen_sync.models.normalized import (
    NormalizedAccount,
    NormalizedTransaction,
)
from nordigen_sync.models.responses import (
    RequisitionStatus,
    Requisition,
    CreatedRequisition,
    RequisitionWithAccounts,
    BookedAndPending,
    TransactionsWithBalance,
)

__all__ = [
    "CreateRequisitionParams",
    "TransactionQuery",
    "NormalizedAccount",
    "NormalizedTransaction",
    "RequisitionStatus",
    "Requisition",
    "CreatedRequisition",
    "RequisitionWithAccounts",
    "BookedAndPending",
    "TransactionsWithBalance",
]
