from typing import Any, Dict, Optional

from nordigen_sync.banks.integration_bank import FallbackBankAdapter
from nordigen_sync.banks.utils import amount_to_integer
from nordigen_sync.models.normalized import NormalizedTransaction


class BancSabadellBankAdapter(FallbackBankAdapter):
    institution_ids = frozenset({"BANCSABADELL_BSABESBBB"})

    access_valid_for_days = 180

    def normalize_transaction(
        self, transaction: Dict[str, Any], booked: bool
    ) -> Optional[NormalizedTransaction]:
        # The counterparty name only arrives in the unstructured array. It is
        # the creditor for outgoing money and the debtor for incoming money.
        amount = amount_to_integer(
            (transaction.get("transactionAmount") or {}).get("amount", "0")
        )
        payee_name = " ".join(
            transaction.get("remittanceInformationUnstructuredArray") or []
        ).strip() or None

        transaction = dict(transaction)
        if amount < 0:
            transaction["creditorName"] = payee_name
            transaction["debtorName"] = None
        else:
            transaction["creditorName"] = None
            transaction["debtorName"] = payee_name

        normalized = super().normalize_transaction(transaction, booked)
        if normalized is None:
            return None

        # The default creditor falls back to the debtor; here the role is known
        return normalized.model_copy(update={"creditor_name": transaction["creditorName"]})
