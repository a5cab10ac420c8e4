"""Request models for the Nordigen sync service."""

from datetime import date
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, ValidationInfo


class CreateRequisitionParams(BaseModel):
    """Parameters for starting a new consent flow."""

    institution_id: str = Field(..., min_length=1, description="Institution identifier")
    access_valid_for_days: Optional[int] = Field(
        None, ge=1, le=180, description="Consent duration; adapter default when omitted"
    )
    redirect_host: str = Field(..., min_length=1, description="Host the end user returns to")

    @field_validator("redirect_host")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Avoid a double slash when the redirect path is appended."""
        return v.rstrip("/")


class TransactionQuery(BaseModel):
    """Date window for a transaction request."""

    account_id: str = Field(..., min_length=1, description="Account identifier")
    date_from: Optional[date] = Field(None, description="Start date for transactions")
    date_to: Optional[date] = Field(None, description="End date for transactions")

    @field_validator("date_to")
    @classmethod
    def validate_date_range(cls, v, info: ValidationInfo):
        """Validate that date_to is not before date_from."""
        date_from = info.data.get("date_from")
        if date_from and v and v < date_from:
            raise ValueError("date_to must be after date_from")
        return v

    def to_query_params(self) -> Dict[str, Any]:
        """Convert to the keyword arguments of the transactions call."""
        params = {}
        if self.date_from:
            params["date_from"] = self.date_from.isoformat()
        if self.date_to:
            params["date_to"] = self.date_to.isoformat()
        return params
