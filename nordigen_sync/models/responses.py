"""Response and result models for the Nordigen sync service."""

from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from nordigen_sync.models.normalized import NormalizedAccount


class RequisitionStatus(str, Enum):
    """Requisition status codes as reported upstream."""

    CREATED = "CR"
    GIVING_CONSENT = "GC"
    UNDERGOING_AUTHENTICATION = "UA"
    REJECTED = "RJ"
    SELECTING_ACCOUNTS = "SA"
    GRANTING_ACCESS = "GA"
    LINKED = "LN"
    EXPIRED = "EX"
    SUSPENDED = "SU"
    INITIATED = "ID"
    ERROR = "ER"


class Requisition(BaseModel):
    """Consent object binding an end user's authorization to accounts.

    ``status`` is kept as the raw code so that codes added upstream still
    parse; they are simply not linked.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Requisition identifier")
    status: str = Field(..., description="Requisition status code, see RequisitionStatus")
    accounts: List[str] = Field(default_factory=list, description="Linked account identifiers")
    institution_id: Optional[str] = Field(None, description="Target institution identifier")
    link: Optional[str] = Field(None, description="Consent link for the end user")
    reference: Optional[str] = Field(None, description="Caller supplied reference")
    redirect: Optional[str] = Field(None, description="Redirect URL after consent")
    agreement: Optional[str] = Field(None, description="End user agreement identifier")
    created: Optional[str] = Field(None, description="Creation timestamp")

    @property
    def is_linked(self) -> bool:
        return self.status == RequisitionStatus.LINKED.value


class CreatedRequisition(BaseModel):
    """Result of starting a consent flow."""

    link: str = Field(..., description="URL the end user follows to authorize")
    requisition_id: str = Field(..., description="Requisition identifier")


class RequisitionWithAccounts(BaseModel):
    """Linked requisition together with its normalized accounts."""

    requisition: Requisition
    accounts: List[NormalizedAccount] = Field(default_factory=list)


class BookedAndPending(BaseModel):
    booked: List[Dict[str, Any]] = Field(default_factory=list)
    pending: List[Dict[str, Any]] = Field(default_factory=list)


class TransactionsWithBalance(BaseModel):
    """Sorted transactions with the reconciled starting balance."""

    balances: List[Dict[str, Any]] = Field(default_factory=list, description="Raw balance snapshots")
    institution_id: Optional[str] = Field(None, description="Institution of the requisition")
    starting_balance: int = Field(..., description="Opening balance in minor units")
    transactions: BookedAndPending = Field(default_factory=BookedAndPending)
