"""Default bank adapter used for every institution without its own."""

from typing import Any, Dict, List, Optional, Sequence

from nordigen_sync.banks.base import BankAdapter
from nordigen_sync.banks.utils import amount_to_integer, format_payee_name, print_iban
from nordigen_sync.client.exceptions import MissingBalanceError
from nordigen_sync.models.normalized import NormalizedAccount, NormalizedTransaction

DATE_FIELDS = ("bookingDate", "bookingDateTime", "valueDate", "valueDateTime")


class FallbackBankAdapter(BankAdapter):
    """Default behaviour for all adapter operations.

    Institution adapters subclass this and override only the operations where
    the institution deviates.
    """

    def normalize_account(self, account: Dict[str, Any]) -> NormalizedAccount:
        iban = account.get("iban")
        owner_name = account.get("ownerName") or account.get("owner_name") or account.get("name")

        return NormalizedAccount(
            account_id=account["id"],
            institution=account.get("institution"),
            mask=(iban or "0000")[-4:],
            iban=iban,
            name=" ".join(part for part in (owner_name, print_iban(account)) if part),
            official_name=account.get("product"),
            type="checking",
        )

    def transaction_date(self, transaction: Dict[str, Any]) -> Optional[str]:
        """Pick the first populated date field, as YYYY-MM-DD."""
        for field in DATE_FIELDS:
            value = transaction.get(field)
            if value:
                return str(value)[:10]
        return None

    def remittance_information(self, transaction: Dict[str, Any]) -> Optional[str]:
        remittance = (
            transaction.get("remittanceInformationUnstructured")
            or transaction.get("remittanceInformationStructured")
            or " ".join(transaction.get("remittanceInformationStructuredArray") or [])
        )

        additional = transaction.get("additionalInformation")
        if additional:
            remittance = f"{remittance} {additional}" if remittance else additional

        return remittance or None

    def creditor_name(self, transaction: Dict[str, Any]) -> Optional[str]:
        return (
            transaction.get("ultimateCreditor")
            or transaction.get("creditorName")
            or transaction.get("debtorName")
        )

    def transaction_id(self, transaction: Dict[str, Any]) -> Optional[str]:
        return transaction.get("transactionId") or transaction.get("internalTransactionId")

    def normalize_transaction(
        self, transaction: Dict[str, Any], booked: bool
    ) -> Optional[NormalizedTransaction]:
        date = self.transaction_date(transaction)

        # Without a usable date the transaction is skipped; it is picked up
        # again on a later import once the bank has processed it further.
        if not date:
            return None

        amount = transaction.get("transactionAmount") or {}

        return NormalizedTransaction(
            transaction_id=self.transaction_id(transaction),
            date=date,
            amount=amount_to_integer(amount.get("amount", "0")),
            currency=amount.get("currency"),
            booked=booked,
            payee_name=format_payee_name(transaction) or None,
            creditor_name=self.creditor_name(transaction),
            remittance_information=self.remittance_information(transaction),
            raw=dict(transaction),
        )

    def sort_transactions(
        self, transactions: Optional[Sequence[Dict[str, Any]]]
    ) -> List[Dict[str, Any]]:
        return list(transactions or [])

    def find_current_balance(self, balances: Optional[Sequence[Dict[str, Any]]]) -> Dict[str, Any]:
        for balance in balances or []:
            if balance.get("balanceType") == self.current_balance_type:
                return balance
        raise MissingBalanceError(self.current_balance_type)

    def calculate_starting_balance(
        self,
        sorted_transactions: Optional[Sequence[Dict[str, Any]]],
        balances: Optional[Sequence[Dict[str, Any]]],
    ) -> int:
        """Reverse every transaction out of the current balance.

        The API does not report a balance after each transaction, so the
        opening balance of the window is the current balance minus the sum of
        all transactions since. This only holds when ``sorted_transactions``
        covers exactly the period between the window start and the balance
        snapshot.
        """
        current_balance = self.find_current_balance(balances)
        total = amount_to_integer(current_balance["balanceAmount"]["amount"])

        for transaction in sorted_transactions or []:
            total -= amount_to_integer(transaction["transactionAmount"]["amount"])

        return total
