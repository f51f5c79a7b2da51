"""Pytest fixtures for testing"""

import pytest
from typing import Any, Dict, Generator, List, Tuple
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from customer_sync.api.main import create_app
from customer_sync.api.dependencies import get_remote_client
from customer_sync.domain import hooks as hook_names
from customer_sync.domain.hooks import Hooks
from customer_sync.domain.synchronizer import CustomerSynchronizer
from customer_sync.infrastructure.database.cache import SQLCache
from customer_sync.infrastructure.database.models import Base
from customer_sync.infrastructure.database.repositories import AccountRepository, TokenRepository
from customer_sync.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./customer_sync_test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ACCOUNT_REF = "42"


class FakeRemoteAPI:
    """
    Stand-in for the payment API.

    Responses are queued per (method, path); the last queued response for a
    route is repeated once the queue drains. Unrouted calls get an error.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[Dict[str, Any], str, str]] = []
        self._routes: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}

    def on(self, method: str, path: str, *responses: Dict[str, Any]) -> None:
        self._routes.setdefault((method, path), []).extend(responses)

    def request(self, payload: Dict[str, Any], path: str, method: str = "POST") -> Dict[str, Any]:
        self.calls.append((dict(payload), path, method))
        queue = self._routes.get((method, path))
        if not queue:
            return {"error": {"message": f"No fake response for {method} {path}"}}
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [payload for payload, call_path, call_method in self.calls if (call_method, call_path) == (method, path)]


class RecordingHooks(Hooks):
    """Hooks registry that records every emitted event"""

    def __init__(self) -> None:
        super().__init__()
        self.events: List[Tuple[str, tuple]] = []
        for name in (
            hook_names.CUSTOMER_CREATED,
            hook_names.SOURCE_ADDED,
            hook_names.SOURCE_DELETED,
            hook_names.DEFAULT_SOURCE_SET,
        ):
            self.subscribe(name, lambda *payload, name=name: self.events.append((name, payload)))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def remote() -> FakeRemoteAPI:
    return FakeRemoteAPI()


@pytest.fixture
def hooks() -> RecordingHooks:
    return RecordingHooks()


@pytest.fixture
def accounts(db: Session) -> AccountRepository:
    return AccountRepository(db)


@pytest.fixture
def cache(db: Session) -> SQLCache:
    return SQLCache(db)


@pytest.fixture
def tokens(db: Session) -> TokenRepository:
    return TokenRepository(db)


@pytest.fixture
def account(accounts: AccountRepository) -> str:
    """Local account with billing name metadata and no remote customer yet"""
    accounts.create_account(ACCOUNT_REF, "ada@example.com")
    accounts.set_meta(ACCOUNT_REF, "billing_first_name", "Ada")
    accounts.set_meta(ACCOUNT_REF, "billing_last_name", "Lovelace")
    accounts.db.commit()
    return ACCOUNT_REF


@pytest.fixture
def synchronizer(
    remote: FakeRemoteAPI,
    accounts: AccountRepository,
    cache: SQLCache,
    tokens: TokenRepository,
    hooks: RecordingHooks,
) -> CustomerSynchronizer:
    return CustomerSynchronizer(remote=remote, accounts=accounts, cache=cache, tokens=tokens, hooks=hooks)


@pytest.fixture
def client(db: Session, remote: FakeRemoteAPI, hooks: RecordingHooks) -> TestClient:
    """Create FastAPI test client with test database and fake payment API"""
    app = create_app(hooks=hooks)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_remote_client] = lambda: remote
    return TestClient(app)
