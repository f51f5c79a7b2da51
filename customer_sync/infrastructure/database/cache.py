"""Expiring key/value cache stored in the cache_entry table"""

import time
from typing import Any, Optional
from sqlalchemy.orm import Session
from customer_sync.infrastructure.database.models import CacheEntry


class SQLCache:
    """Cache backed by the application database; expired rows are removed on read"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[Any]:
        row = self.db.get(CacheEntry, key)
        if row is None:
            return None

        if row.expires_at <= time.time():
            self.db.delete(row)
            self.db.flush()
            return None

        return row.value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        expires_at = time.time() + ttl_seconds
        row = self.db.get(CacheEntry, key)
        if row is None:
            self.db.add(CacheEntry(key=key, value=value, expires_at=expires_at))
        else:
            row.value = value
            row.expires_at = expires_at
        self.db.flush()

    def delete(self, key: str) -> None:
        row = self.db.get(CacheEntry, key)
        if row is not None:
            self.db.delete(row)
            self.db.flush()
