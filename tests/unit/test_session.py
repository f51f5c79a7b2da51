"""Unit tests for engine configuration"""

from customer_sync.infrastructure.database.session import engine_options


def test_sqlite_url_skips_pool_settings():
    assert engine_options("sqlite:///./local.db") == {"connect_args": {"check_same_thread": False}}


def test_server_url_uses_connection_pool():
    options = engine_options("postgresql+psycopg2://user:pass@db:5432/customer_sync")

    assert options["pool_pre_ping"] is True
    assert options["pool_size"] == 10
    assert options["pool_recycle"] == 3600
