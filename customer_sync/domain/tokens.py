"""Mapping of remote payment-source shapes into local tokens"""

from typing import Any, Dict, Optional

from customer_sync.domain.models import LocalToken, RemoteResponse

CARD_GATEWAY = "card"
SEPA_GATEWAY = "sepa"


def _lower(value: Any) -> Optional[str]:
    return value.lower() if isinstance(value, str) else None


def _card_token(source_id: str, card: Dict[str, Any], account_ref: str) -> LocalToken:
    return LocalToken(
        remote_source_id=source_id,
        gateway_tag=CARD_GATEWAY,
        owner_account_ref=account_ref,
        card_brand=_lower(card.get("brand")),
        last4=card.get("last4"),
        expiry_month=card.get("exp_month"),
        expiry_year=card.get("exp_year"),
    )


def token_from_source(response: RemoteResponse, account_ref: str) -> Optional[LocalToken]:
    """
    Project an attached payment source into a local token.

    First match wins:
    - type alipay:                 no token
    - type sepa_debit:             sepa token, last4 from the nested sepa_debit object
    - object source + type card:   card token from the nested card object
    - nested sepa_debit or card payload missing or not an object: no token
    - any other type:              no token
    - no type (legacy card shape): card token from top-level fields

    Returns None when the source has no local representation.
    """
    source_id = response["id"]
    source_type = response.get("type")

    if not source_type:
        return _card_token(source_id, response, account_ref)

    if source_type == "alipay":
        return None

    if source_type == "sepa_debit":
        sepa = response.get("sepa_debit")
        if not isinstance(sepa, dict):
            return None
        return LocalToken(
            remote_source_id=source_id,
            gateway_tag=SEPA_GATEWAY,
            owner_account_ref=account_ref,
            last4=sepa.get("last4"),
        )

    if response.get("object") == "source" and source_type == "card":
        card = response.get("card")
        if not isinstance(card, dict):
            return None
        return _card_token(source_id, card, account_ref)

    return None
