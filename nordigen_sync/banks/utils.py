"""Helpers shared by the bank adapters."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Mapping, Optional


def amount_to_integer(amount: Any) -> int:
    """Convert a decimal-string amount into integer minor units.

    >>> amount_to_integer("-12.345")
    -1235
    """
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    return int((value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def print_iban(account: Optional[Mapping[str, Any]]) -> str:
    if account and account.get("iban"):
        return f"(XXX {account['iban'][-4:]})"
    return ""


def format_payee_name(transaction: Mapping[str, Any]) -> str:
    """Build a payee display name from the counterparty of a transaction.

    Incoming money names the debtor, outgoing money names the creditor. When
    the matching side is missing the other side or the remittance text is
    used instead.
    """
    amount = amount_to_integer(
        (transaction.get("transactionAmount") or {}).get("amount", "0")
    )

    if amount >= 0:
        name = transaction.get("debtorName")
        account = transaction.get("debtorAccount")
    else:
        name = transaction.get("creditorName")
        account = transaction.get("creditorAccount")

    name = (
        name
        or transaction.get("debtorName")
        or transaction.get("creditorName")
        or transaction.get("remittanceInformationUnstructured")
        or ", ".join(transaction.get("remittanceInformationUnstructuredArray") or [])
        or transaction.get("additionalInformation")
    )

    name_parts = []
    if name:
        name_parts.append(name.strip())
    if account and account.get("iban"):
        name_parts.append(print_iban(account))

    return " ".join(name_parts)
