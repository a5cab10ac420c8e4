from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from nordigen_sync.banks.integration_bank import FallbackBankAdapter
from nordigen_sync.banks.utils import amount_to_integer
from nordigen_sync.models.normalized import NormalizedTransaction

BILLING_AMOUNT_PREFIX = "billingAmount: "
BILLING_CURRENCY = "SEK"


def _format_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return None


class EntercardBankAdapter(FallbackBankAdapter):
    """Entercard credit cards.

    Forex transactions carry the foreign amount in ``transactionAmount``; the
    amount billed to the card is only found in the remittance text as
    ``billingAmount: <amount>``.
    """

    institution_ids = frozenset({"ENTERCARD_SWEDNOKK"})

    access_valid_for_days = 180

    def normalize_transaction(
        self, transaction: Dict[str, Any], booked: bool
    ) -> Optional[NormalizedTransaction]:
        date = _format_date(transaction.get("valueDate"))
        if not date:
            return None

        transaction = dict(transaction)
        remittance = transaction.get("remittanceInformationUnstructured") or ""
        if remittance.startswith(BILLING_AMOUNT_PREFIX):
            transaction["transactionAmount"] = {
                "amount": remittance[len(BILLING_AMOUNT_PREFIX):].strip(),
                "currency": BILLING_CURRENCY,
            }

        normalized = super().normalize_transaction(transaction, booked)
        return normalized.model_copy(update={"date": date})

    def calculate_starting_balance(
        self,
        sorted_transactions: Optional[Sequence[Dict[str, Any]]],
        balances: Optional[Sequence[Dict[str, Any]]],
    ) -> int:
        # Only one balance is reported, whatever its type.
        balances = list(balances or [])
        total = 0
        if balances:
            total = amount_to_integer(
                (balances[0].get("balanceAmount") or {}).get("amount", "0")
            )

        for transaction in sorted_transactions or []:
            total -= amount_to_integer(transaction["transactionAmount"]["amount"])

        return total
