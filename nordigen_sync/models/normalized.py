"""Stable output shapes produced by the bank adapters."""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class NormalizedAccount(BaseModel):
    """Account in the shape consumed by callers."""

    account_id: str = Field(..., description="Account identifier")
    institution: Optional[Dict[str, Any]] = Field(None, description="Joined institution metadata")
    mask: str = Field(..., description="Last characters of the account number")
    iban: Optional[str] = Field(None, description="Account IBAN")
    name: str = Field(..., description="Display name")
    official_name: Optional[str] = Field(None, description="Product name")
    type: str = Field("checking", description="Account type")


class NormalizedTransaction(BaseModel):
    """Transaction with a guaranteed date and an integer minor-unit amount."""

    transaction_id: Optional[str] = Field(None, description="Identifier used for deduplication")
    date: str = Field(..., description="Transaction date (YYYY-MM-DD)")
    amount: int = Field(..., description="Amount in minor currency units")
    currency: Optional[str] = Field(None, description="Currency code (ISO 4217)")
    booked: bool = Field(..., description="Whether the transaction is booked")
    payee_name: Optional[str] = Field(None, description="Counterparty display name")
    creditor_name: Optional[str] = Field(None, description="Most useful creditor name")
    remittance_information: Optional[str] = Field(None, description="Flattened remittance text")
    raw: Dict[str, Any] = Field(default_factory=dict, description="Upstream payload, untouched")
