"""Customer endpoints - remote customer lookup, creation and local tokens"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from customer_sync.api.v1.schemas import (
    CreateCustomerRequest,
    CustomerResponse,
    TokenListResponse,
    TokenResponse,
)
from customer_sync.api.dependencies import get_request_id, get_synchronizer
from customer_sync.domain.exceptions import CustomerCreationError
from customer_sync.domain.synchronizer import CustomerSynchronizer
from customer_sync.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/accounts/{account_ref}/customer", response_model=CustomerResponse)
def get_customer(
    account_ref: str,
    db: Session = Depends(get_db),
    synchronizer: CustomerSynchronizer = Depends(get_synchronizer),
):
    """Remote customer linked to the account, with its default source"""
    handle = synchronizer.resolve(account_ref)
    default_source = synchronizer.get_default_source(handle)
    db.commit()

    return CustomerResponse(
        account_ref=account_ref,
        customer_id=handle.remote_customer_id or None,
        default_source=default_source or None,
    )


@router.post("/accounts/{account_ref}/customer", response_model=CustomerResponse, status_code=201)
def create_customer(
    account_ref: str,
    request_body: CreateCustomerRequest,
    request: Request,
    db: Session = Depends(get_db),
    synchronizer: CustomerSynchronizer = Depends(get_synchronizer),
):
    """Create a remote customer for the account and store its id"""
    request_id = get_request_id(request)
    handle = synchronizer.resolve(account_ref)

    extra_args = {}
    if request_body.description is not None:
        extra_args["description"] = request_body.description
    if request_body.metadata is not None:
        extra_args["metadata"] = request_body.metadata

    try:
        customer_id = synchronizer.create(handle, extra_args, billing_email=request_body.billing_email)
        db.commit()
    except CustomerCreationError as e:
        db.rollback()
        logging.error(f"Customer creation failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return CustomerResponse(
        account_ref=account_ref,
        customer_id=customer_id,
        default_source=synchronizer.get_default_source(handle) or None,
    )


@router.get("/accounts/{account_ref}/tokens", response_model=TokenListResponse)
def list_tokens(
    account_ref: str,
    synchronizer: CustomerSynchronizer = Depends(get_synchronizer),
):
    """Payment tokens persisted locally for the account"""
    tokens = synchronizer.tokens.list_tokens(account_ref)
    return TokenListResponse(
        account_ref=account_ref,
        tokens=[
            TokenResponse(
                remote_source_id=token.remote_source_id,
                gateway_tag=token.gateway_tag,
                card_brand=token.card_brand,
                last4=token.last4,
                expiry_month=token.expiry_month,
                expiry_year=token.expiry_year,
            )
            for token in tokens
        ],
    )
