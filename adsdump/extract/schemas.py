"""
Extract Layer Schemas

Raw response shapes returned by the Graph API.
Records inside ``data`` stay untyped; only the envelope is validated.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AdAccount(BaseModel):
    """Ad account as returned by /me/adaccounts"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="Graph node id, e.g. 'act_1234'")
    account_id: str = Field("", description="Numeric account id without prefix")
    name: str = Field("", description="Display name")
    currency: str = Field("", description="ISO 4217 currency code")
    timezone_name: Optional[str] = Field(None, description="IANA timezone")
    account_status: Optional[int] = Field(None, description="1 = active")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v):
        if not v:
            raise ValueError("Account id must not be empty")
        return v


class Cursors(BaseModel):
    before: str = ""
    after: str = ""

    @field_validator("before", "after", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Upstream sends null instead of omitting an exhausted cursor"""
        return "" if v is None else v


class Paging(BaseModel):
    cursors: Cursors = Field(default_factory=Cursors)
    next: Optional[str] = None


class PaginatedResponse(BaseModel):
    """Schema for one page of a collection endpoint"""

    data: List[Any] = Field(default_factory=list)
    paging: Paging = Field(default_factory=Paging)

    @field_validator("paging", mode="before")
    @classmethod
    def none_to_default(cls, v):
        return {} if v is None else v

    @property
    def after(self) -> str:
        return self.paging.cursors.after


class ErrorDetail(BaseModel):
    message: str = ""
    type: Optional[str] = None
    code: Optional[int] = None


class ErrorEnvelope(BaseModel):
    """Schema for ``{"error": {message, type, code}}`` bodies"""

    error: ErrorDetail
