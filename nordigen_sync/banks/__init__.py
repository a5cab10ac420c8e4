"""Bank adapters and the institution registry.

To support a new institution, subclass ``FallbackBankAdapter`` in its own
module, override only what differs, and add the class to ``BANKS``.
"""

from typing import Dict, List, Optional

from nordigen_sync.banks.base import BankAdapter
from nordigen_sync.banks.integration_bank import FallbackBankAdapter
from nordigen_sync.banks.bancsabadell_bsabesbbb import BancSabadellBankAdapter
from nordigen_sync.banks.belfius_gkccbebb import BelfiusBankAdapter
from nordigen_sync.banks.entercard_swednokk import EntercardBankAdapter
from nordigen_sync.banks.nordea_ndeadkkk import NordeaBankAdapter
from nordigen_sync.banks.sandboxfinance_sfin0000 import SandboxFinanceBankAdapter

BANKS = [
    BancSabadellBankAdapter,
    BelfiusBankAdapter,
    EntercardBankAdapter,
    NordeaBankAdapter,
    SandboxFinanceBankAdapter,
]

FALLBACK = FallbackBankAdapter()

_REGISTRY: Dict[str, BankAdapter] = {
    institution_id: adapter
    for adapter in (bank() for bank in BANKS)
    for institution_id in adapter.institution_ids
}


def resolve(institution_id: Optional[str]) -> BankAdapter:
    """Return the adapter for an institution, or the fallback adapter."""
    if not institution_id:
        return FALLBACK
    return _REGISTRY.get(institution_id, FALLBACK)


def registered_institutions() -> List[str]:
    """Return the institution ids with a dedicated adapter."""
    return sorted(_REGISTRY)


__all__ = [
    "BankAdapter",
    "FallbackBankAdapter",
    "BancSabadellBankAdapter",
    "BelfiusBankAdapter",
    "EntercardBankAdapter",
    "NordeaBankAdapter",
    "SandboxFinanceBankAdapter",
    "BANKS",
    "FALLBACK",
    "resolve",
    "registered_institutions",
]
