"""Customer synchronizer - links local accounts to remote payment customers"""

import logging
from typing import Any, Dict, List, Optional, Union

from customer_sync.config import Settings, settings as default_settings
from customer_sync.domain.exceptions import CustomerCreationError, PaymentSourceError
from customer_sync.domain.hooks import (
    CREATE_CUSTOMER_ARGS,
    CUSTOMER_CREATED,
    CUSTOMER_METADATA,
    DEFAULT_SOURCE_SET,
    SOURCE_ADDED,
    SOURCE_DELETED,
    Hooks,
)
from customer_sync.domain.models import CustomerHandle, RemoteResponse, error_message, is_error
from customer_sync.domain.ports import AccountStore, Cache, RemoteAPI, TokenStore
from customer_sync.domain.tokens import token_from_source
from customer_sync.infrastructure.observability.logging import (
    log_customer_created,
    log_customer_recreated,
    log_source_added,
)
from customer_sync.infrastructure.observability.metrics import (
    customer_created_counter,
    customer_recreated_counter,
    record_cache_lookup,
    source_added_counter,
)
from customer_sync.utils.sanitize import clean_text, sanitize_email

logger = logging.getLogger(__name__)


def customer_cache_key(customer_id: str) -> str:
    return f"customer:{customer_id}"


def sources_cache_key(customer_id: str) -> str:
    return f"sources:{customer_id}"


def is_missing_customer(response: RemoteResponse) -> bool:
    """
    Detect the remote side reporting that the customer no longer exists.

    The payment API only signals this through free text, so this is a
    case-insensitive substring match on the error message.
    """
    return "no such customer" in error_message(response).lower()


class CustomerSynchronizer:
    """
    Owns the lifecycle of a remote customer for a local account.

    Reads are lazy and cached; every mutation invalidates both cache entries.
    Only `create` (and `add_source` when the attach response lacks an id)
    raise; all other remote failures resolve to empty or error-shaped values.
    """

    def __init__(
        self,
        remote: RemoteAPI,
        accounts: AccountStore,
        cache: Cache,
        tokens: TokenStore,
        hooks: Optional[Hooks] = None,
        config: Optional[Settings] = None,
    ):
        self.remote = remote
        self.accounts = accounts
        self.cache = cache
        self.tokens = tokens
        self.hooks = hooks or Hooks()
        self.config = config or default_settings

    # Handle resolution

    def resolve(self, account_ref: Optional[str] = None) -> CustomerHandle:
        """Build a handle for an account without touching the remote API"""
        if not account_ref:
            return CustomerHandle()

        stored_id = self.accounts.get_meta(account_ref, self.config.customer_id_meta_key)
        return CustomerHandle(remote_customer_id=clean_text(stored_id), account_ref=account_ref)

    # Customer record access

    def get_record(self, handle: CustomerHandle) -> RemoteResponse:
        """
        Return the remote customer record, or an empty dict.

        An empty dict means either "not created yet" or "fetch failed";
        failed fetches are never cached.
        """
        if handle.cached_record:
            return handle.cached_record

        if not handle.remote_customer_id:
            return {}

        key = customer_cache_key(handle.remote_customer_id)
        cached = self.cache.get(key)
        record_cache_lookup("customer", cached is not None)
        if cached is not None:
            handle.cached_record = cached
            return cached

        response = self.remote.request({}, f"customers/{handle.remote_customer_id}", "GET")
        if is_error(response):
            logger.info(
                "Remote customer fetch failed",
                extra={"customer_id": handle.remote_customer_id, "error": error_message(response)},
            )
            return {}

        self.cache.set(key, response, self.config.customer_cache_ttl_seconds)
        handle.cached_record = response
        return response

    def get_default_source(self, handle: CustomerHandle) -> str:
        record = self.get_record(handle)
        if not record:
            return ""
        return record.get("default_source") or ""

    # Customer creation

    def _default_customer_args(self, handle: CustomerHandle, billing_email: Optional[str]) -> Dict[str, Any]:
        if handle.account_ref:
            first_name = self.accounts.get_meta(handle.account_ref, self.config.billing_first_name_meta_key)
            last_name = self.accounts.get_meta(handle.account_ref, self.config.billing_last_name_meta_key)
            return {
                "email": self.accounts.get_email(handle.account_ref),
                "description": f"{first_name or ''} {last_name or ''}".strip(),
            }

        return {
            "email": sanitize_email(billing_email),
            "description": "",
        }

    def create(
        self,
        handle: CustomerHandle,
        extra_args: Optional[Dict[str, Any]] = None,
        billing_email: Optional[str] = None,
    ) -> str:
        """
        Create the remote customer and link it to the handle.

        Raises:
            CustomerCreationError: remote API returned an error; carries its message
                or a success response without an id
        """
        defaults = self._default_customer_args(handle, billing_email)
        defaults["metadata"] = self.hooks.apply_filters(CUSTOMER_METADATA, {}, handle.account_ref)

        args = {**defaults, **(extra_args or {})}
        args = self.hooks.apply_filters(CREATE_CUSTOMER_ARGS, args)

        response = self.remote.request(args, "customers")
        if is_error(response):
            raise CustomerCreationError(error_message(response))
        if not response.get("id"):
            raise CustomerCreationError("Unable to create customer.")

        handle.remote_customer_id = response["id"]
        self.invalidate(handle)
        handle.cached_record = response

        if handle.account_ref:
            self.accounts.set_meta(handle.account_ref, self.config.customer_id_meta_key, response["id"])

        customer_created_counter.inc()
        log_customer_created(response["id"], handle.account_ref)
        self.hooks.emit(CUSTOMER_CREATED, args, response)

        return response["id"]

    # Payment sources

    def add_source(
        self,
        handle: CustomerHandle,
        source_id: str,
        allow_retry: bool = True,
        billing_email: Optional[str] = None,
    ) -> Union[str, RemoteResponse]:
        """
        Attach a payment source to the customer, creating the customer first if needed.

        Returns the new source id, or the error-shaped response when the remote
        API refuses the attach. A stale stored customer id triggers exactly one
        recreation and retry.

        Raises:
            CustomerCreationError: creating the customer failed
            PaymentSourceError: attach response carried no id
        """
        if not handle.remote_customer_id:
            self.create(handle, billing_email=billing_email)

        response = self.remote.request(
            {"source": source_id},
            f"customers/{handle.remote_customer_id}/sources",
        )

        if is_error(response):
            if allow_retry and is_missing_customer(response):
                self._recreate_customer(handle, billing_email)
                return self.add_source(handle, source_id, allow_retry=False, billing_email=billing_email)
            return response

        if not response.get("id"):
            raise PaymentSourceError()

        token = None
        if handle.account_ref:
            token = token_from_source(response, handle.account_ref)
            if token is not None:
                self.tokens.create_token(token)

        self.invalidate(handle)

        token_kind = token.gateway_tag if token else "none"
        source_added_counter.labels(token_kind=token_kind).inc()
        log_source_added(handle.remote_customer_id, response["id"], token_kind)
        self.hooks.emit(SOURCE_ADDED, handle.remote_customer_id, token, response, source_id)

        return response["id"]

    def _recreate_customer(self, handle: CustomerHandle, billing_email: Optional[str]) -> None:
        stale_id = handle.remote_customer_id
        log_customer_recreated(stale_id, handle.account_ref)
        customer_recreated_counter.inc()

        self.invalidate(handle)
        if handle.account_ref:
            self.accounts.delete_meta(handle.account_ref, self.config.customer_id_meta_key)
        handle.remote_customer_id = ""

        self.create(handle, billing_email=billing_email)

    def list_sources(self, handle: CustomerHandle) -> List[Dict[str, Any]]:
        """Return the customer's payment sources; errors degrade to an empty list"""
        if not handle.remote_customer_id:
            return []

        key = sources_cache_key(handle.remote_customer_id)
        cached = self.cache.get(key)
        record_cache_lookup("sources", cached is not None)
        if cached is not None:
            return cached

        response = self.remote.request(
            {"limit": self.config.sources_page_size},
            f"customers/{handle.remote_customer_id}/sources",
            "GET",
        )
        if is_error(response):
            logger.info(
                "Remote source listing failed",
                extra={"customer_id": handle.remote_customer_id, "error": error_message(response)},
            )
            return []

        sources = response.get("data")
        if not isinstance(sources, list):
            return []

        self.cache.set(key, sources, self.config.sources_cache_ttl_seconds)
        return sources

    def delete_source(self, handle: CustomerHandle, source_id: str) -> bool:
        response = self.remote.request(
            {},
            f"customers/{handle.remote_customer_id}/sources/{clean_text(source_id)}",
            "DELETE",
        )
        self.invalidate(handle)

        if is_error(response):
            return False

        self.hooks.emit(SOURCE_DELETED, handle.remote_customer_id, response)
        return True

    def set_default_source(self, handle: CustomerHandle, source_id: str) -> bool:
        response = self.remote.request(
            {"default_source": clean_text(source_id)},
            f"customers/{handle.remote_customer_id}",
            "POST",
        )
        self.invalidate(handle)

        if is_error(response):
            return False

        self.hooks.emit(DEFAULT_SOURCE_SET, handle.remote_customer_id, response)
        return True

    # Cache invalidation

    def invalidate(self, handle: CustomerHandle) -> None:
        """Drop both cache entries for the handle's customer and the in-memory record"""
        self.cache.delete(sources_cache_key(handle.remote_customer_id))
        self.cache.delete(customer_cache_key(handle.remote_customer_id))
        handle.cached_record = {}
