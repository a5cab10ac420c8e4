"""Bank adapter interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from nordigen_sync.config.logging import get_logger
from nordigen_sync.config.settings import settings
from nordigen_sync.models.normalized import NormalizedAccount, NormalizedTransaction

logger = get_logger(__name__)


class BankAdapter(ABC):
    """Normalization and reconciliation contract for one or more institutions.

    Adapters hold no state between calls; every method works only on the data
    passed in.
    """

    #: Institution identifiers this adapter answers for.
    institution_ids: FrozenSet[str] = frozenset()

    #: Consent duration proposed when creating a requisition.
    access_valid_for_days: int = settings.nordigen_default_access_valid_for_days

    #: Balance type treated as the current balance during reconciliation.
    current_balance_type: str = "interimAvailable"

    @abstractmethod
    def normalize_account(self, account: Dict[str, Any]) -> NormalizedAccount:
        """Map a merged raw account onto the stable output shape."""

    @abstractmethod
    def normalize_transaction(
        self, transaction: Dict[str, Any], booked: bool
    ) -> Optional[NormalizedTransaction]:
        """Normalize a raw transaction, or return None to drop it."""

    @abstractmethod
    def sort_transactions(
        self, transactions: Optional[Sequence[Dict[str, Any]]]
    ) -> List[Dict[str, Any]]:
        """Return the transactions in this institution's canonical order."""

    @abstractmethod
    def calculate_starting_balance(
        self,
        sorted_transactions: Optional[Sequence[Dict[str, Any]]],
        balances: Optional[Sequence[Dict[str, Any]]],
    ) -> int:
        """Derive the opening balance of the window in minor units."""

    def normalize_transactions(
        self, transactions: Optional[Sequence[Dict[str, Any]]], booked: bool
    ) -> List[NormalizedTransaction]:
        """Normalize a batch, leaving out dropped transactions."""
        normalized = []
        for transaction in transactions or []:
            result = self.normalize_transaction(transaction, booked)
            if result is None:
                logger.debug(
                    f"Skipping transaction {transaction.get('transactionId')} "
                    f"for {type(self).__name__}"
                )
                continue
            normalized.append(result)
        return normalized

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sorted(self.institution_ids)})"
