"""Pydantic request/response schemas for API validation"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class CreateCustomerRequest(BaseModel):
    """Request body for POST /v1/accounts/{account_ref}/customer"""

    billing_email: Optional[str] = Field(None, description="Billing email, used when the account has none")
    description: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None


class CustomerResponse(BaseModel):
    """Remote customer linked to an account"""

    account_ref: str
    customer_id: Optional[str] = Field(None, description="Remote customer id, null until created")
    default_source: Optional[str] = None


class AddSourceRequest(BaseModel):
    """Request body for attaching a payment source"""

    source_id: str = Field(..., min_length=1, description="Remote source or token id")
    billing_email: Optional[str] = None


class AddSourceResponse(BaseModel):
    customer_id: str
    source_id: str


class SetDefaultSourceRequest(BaseModel):
    source_id: str = Field(..., min_length=1)


class SourceListResponse(BaseModel):
    customer_id: Optional[str] = None
    sources: List[Dict[str, Any]]


class DeleteSourceResponse(BaseModel):
    deleted: bool


class SetDefaultSourceResponse(BaseModel):
    updated: bool


class TokenResponse(BaseModel):
    """Locally persisted payment token"""

    remote_source_id: str
    gateway_tag: str
    card_brand: Optional[str] = None
    last4: Optional[str] = None
    expiry_month: Optional[int] = None
    expiry_year: Optional[int] = None


class TokenListResponse(BaseModel):
    account_ref: str
    tokens: List[TokenResponse]
