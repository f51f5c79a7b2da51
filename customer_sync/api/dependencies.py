"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from customer_sync.domain.hooks import Hooks
from customer_sync.domain.synchronizer import CustomerSynchronizer
from customer_sync.infrastructure.clients.stripe import StripeClient
from customer_sync.infrastructure.database.cache import SQLCache
from customer_sync.infrastructure.database.repositories import AccountRepository, TokenRepository
from customer_sync.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_remote_client() -> StripeClient:
    """Provide payment API client instance"""
    return StripeClient()


def get_hooks(request: Request) -> Hooks:
    """Hooks registry built by the application factory"""
    return request.app.state.hooks


def get_synchronizer(
    db: Session = Depends(get_db),
    remote: StripeClient = Depends(get_remote_client),
    hooks: Hooks = Depends(get_hooks),
) -> CustomerSynchronizer:
    """Request-scoped synchronizer over the current database session"""
    return CustomerSynchronizer(
        remote=remote,
        accounts=AccountRepository(db),
        cache=SQLCache(db),
        tokens=TokenRepository(db),
        hooks=hooks,
    )
