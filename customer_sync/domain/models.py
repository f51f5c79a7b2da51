"""Domain models - pure Python dataclasses representing customer sync state"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Raw JSON object returned by the remote payment API. Error responses carry
# an "error" object with a "message" string instead of domain fields.
RemoteResponse = Dict[str, Any]


@dataclass
class CustomerHandle:
    """Request-scoped link between a local account and a remote customer"""

    remote_customer_id: str = ""
    account_ref: Optional[str] = None
    cached_record: RemoteResponse = field(default_factory=dict)


@dataclass
class LocalToken:
    """Payment source projected into local token storage"""

    remote_source_id: str
    gateway_tag: str  # "card" or "sepa"
    owner_account_ref: str
    card_brand: Optional[str] = None
    last4: Optional[str] = None
    expiry_month: Optional[int] = None
    expiry_year: Optional[int] = None


def is_error(response: RemoteResponse) -> bool:
    """True when the remote response is error-shaped"""
    return bool(response.get("error"))


def error_message(response: RemoteResponse) -> str:
    error = response.get("error") or {}
    if isinstance(error, dict):
        return str(error.get("message") or "")
    return str(error)
