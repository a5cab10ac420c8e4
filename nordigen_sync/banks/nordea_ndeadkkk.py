from typing import Any, Dict, Optional

from nordigen_sync.banks.integration_bank import FallbackBankAdapter
from nordigen_sync.models.normalized import NormalizedTransaction

SYNTHETIC_TRANSACTION_PREFIX = "P"


class NordeaBankAdapter(FallbackBankAdapter):
    institution_ids = frozenset({"NORDEA_NDEADKKK"})

    access_valid_for_days = 90

    def normalize_transaction(
        self, transaction: Dict[str, Any], booked: bool
    ) -> Optional[NormalizedTransaction]:
        # Ids starting with "P" mark placeholder entries that duplicate a
        # real transaction.
        if (transaction.get("transactionId") or "").startswith(SYNTHETIC_TRANSACTION_PREFIX):
            return None

        return super().normalize_transaction(transaction, booked)
