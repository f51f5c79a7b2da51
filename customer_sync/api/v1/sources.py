"""Payment source endpoints - attach, list, delete and set default"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from customer_sync.api.v1.schemas import (
    AddSourceRequest,
    AddSourceResponse,
    DeleteSourceResponse,
    SetDefaultSourceRequest,
    SetDefaultSourceResponse,
    SourceListResponse,
)
from customer_sync.api.dependencies import get_request_id, get_synchronizer
from customer_sync.domain.exceptions import CustomerCreationError, PaymentSourceError
from customer_sync.domain.models import error_message
from customer_sync.domain.synchronizer import CustomerSynchronizer
from customer_sync.infrastructure.database.session import get_db

router = APIRouter()


def _attach(
    synchronizer: CustomerSynchronizer,
    db: Session,
    request_id: str,
    account_ref: Optional[str],
    request_body: AddSourceRequest,
) -> AddSourceResponse:
    """
    Attach a source and commit whatever the synchronizer changed locally.

    A recreated customer is kept even when the attach itself is refused.
    """
    handle = synchronizer.resolve(account_ref)

    try:
        result = synchronizer.add_source(handle, request_body.source_id, billing_email=request_body.billing_email)
    except CustomerCreationError as e:
        db.commit()
        logging.error(f"Customer creation failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail=str(e))
    except PaymentSourceError as e:
        db.commit()
        logging.error(f"Attach returned no source: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    db.commit()

    if isinstance(result, dict):
        logging.warning(
            f"Payment source refused: {error_message(result)}",
            extra={"request_id": request_id, "customer_id": handle.remote_customer_id},
        )
        raise HTTPException(status_code=402, detail=error_message(result))

    return AddSourceResponse(customer_id=handle.remote_customer_id, source_id=result)


@router.get("/accounts/{account_ref}/sources", response_model=SourceListResponse)
def list_sources(
    account_ref: str,
    db: Session = Depends(get_db),
    synchronizer: CustomerSynchronizer = Depends(get_synchronizer),
):
    """Saved payment sources for the account's remote customer (cached)"""
    handle = synchronizer.resolve(account_ref)
    sources = synchronizer.list_sources(handle)
    db.commit()

    return SourceListResponse(customer_id=handle.remote_customer_id or None, sources=sources)


@router.post("/accounts/{account_ref}/sources", response_model=AddSourceResponse, status_code=201)
def add_source(
    account_ref: str,
    request_body: AddSourceRequest,
    request: Request,
    db: Session = Depends(get_db),
    synchronizer: CustomerSynchronizer = Depends(get_synchronizer),
):
    """Attach a payment source, creating or recreating the remote customer as needed"""
    return _attach(synchronizer, db, get_request_id(request), account_ref, request_body)


@router.post("/guest/sources", response_model=AddSourceResponse, status_code=201)
def add_guest_source(
    request_body: AddSourceRequest,
    request: Request,
    db: Session = Depends(get_db),
    synchronizer: CustomerSynchronizer = Depends(get_synchronizer),
):
    """Attach a payment source for a checkout without an account; no token is stored"""
    return _attach(synchronizer, db, get_request_id(request), None, request_body)


@router.delete("/accounts/{account_ref}/sources/{source_id}", response_model=DeleteSourceResponse)
def delete_source(
    account_ref: str,
    source_id: str,
    db: Session = Depends(get_db),
    synchronizer: CustomerSynchronizer = Depends(get_synchronizer),
):
    handle = synchronizer.resolve(account_ref)
    deleted = synchronizer.delete_source(handle, source_id)
    db.commit()
    return DeleteSourceResponse(deleted=deleted)


@router.post("/accounts/{account_ref}/default-source", response_model=SetDefaultSourceResponse)
def set_default_source(
    account_ref: str,
    request_body: SetDefaultSourceRequest,
    db: Session = Depends(get_db),
    synchronizer: CustomerSynchronizer = Depends(get_synchronizer),
):
    handle = synchronizer.resolve(account_ref)
    updated = synchronizer.set_default_source(handle, request_body.source_id)
    db.commit()
    return SetDefaultSourceResponse(updated=updated)
