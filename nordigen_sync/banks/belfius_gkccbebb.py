from typing import Any, Dict, Optional

from nordigen_sync.banks.integration_bank import FallbackBankAdapter
from nordigen_sync.models.normalized import NormalizedTransaction


class BelfiusBankAdapter(FallbackBankAdapter):
    institution_ids = frozenset({"BELFIUS_GKCCBEBB"})

    access_valid_for_days = 180

    def normalize_transaction(
        self, transaction: Dict[str, Any], booked: bool
    ) -> Optional[NormalizedTransaction]:
        # Belfius reuses public transaction ids across different transactions.
        # The API exposes a unique internalTransactionId for these cases.
        date = transaction.get("bookingDate") or transaction.get("valueDate")
        if not date:
            return None

        normalized = super().normalize_transaction(transaction, booked)
        return normalized.model_copy(
            update={
                "transaction_id": transaction.get("internalTransactionId"),
                "date": str(date)[:10],
            }
        )
