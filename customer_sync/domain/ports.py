"""Collaborator contracts consumed by the customer synchronizer"""

from typing import Any, List, Optional, Protocol

from customer_sync.domain.models import LocalToken, RemoteResponse


class RemoteAPI(Protocol):
    def request(self, payload: dict, path: str, method: str = "POST") -> RemoteResponse:
        """Issue a call against the payment API. Never raises."""
        ...


class AccountStore(Protocol):
    def get_email(self, account_ref: str) -> str: ...

    def get_meta(self, account_ref: str, key: str) -> str: ...

    def set_meta(self, account_ref: str, key: str, value: str) -> None: ...

    def delete_meta(self, account_ref: str, key: str) -> None: ...


class Cache(Protocol):
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss"""
        ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    def delete(self, key: str) -> None: ...


class TokenStore(Protocol):
    def create_token(self, token: LocalToken) -> None: ...

    def list_tokens(self, account_ref: str) -> List[LocalToken]: ...
