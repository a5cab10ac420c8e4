from typing import Any, Dict, List, Optional, Sequence

from nordigen_sync.banks.integration_bank import FallbackBankAdapter


class SandboxFinanceBankAdapter(FallbackBankAdapter):
    """Nordigen sandbox institution.

    ``interimBooked`` is used as the current balance because it includes the
    transactions placed during the current day.
    """

    institution_ids = frozenset({"SANDBOXFINANCE_SFIN0000"})

    access_valid_for_days = 90

    current_balance_type = "interimBooked"

    def sort_transactions(
        self, transactions: Optional[Sequence[Dict[str, Any]]]
    ) -> List[Dict[str, Any]]:
        # newest first
        return sorted(
            transactions or [],
            key=lambda transaction: self.transaction_date(transaction) or "",
            reverse=True,
        )
