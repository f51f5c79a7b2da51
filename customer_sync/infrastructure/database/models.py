"""SQLAlchemy ORM models for accounts, payment tokens and the cache table"""

from sqlalchemy import Column, String, Integer, Float, DateTime, Text, JSON, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class UserAccount(Base):
    """Local user account"""

    __tablename__ = "user_account"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class AccountMeta(Base):
    """Free-form key/value metadata attached to an account"""

    __tablename__ = "account_meta"
    __table_args__ = (UniqueConstraint("account_ref", "key", name="uq_account_meta_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_ref = Column(Text, nullable=False, index=True)
    key = Column(String(255), nullable=False)
    value = Column(Text, nullable=False, default="")


class PaymentToken(Base):
    """Locally persisted projection of a remote payment source"""

    __tablename__ = "payment_token"

    id = Column(Integer, primary_key=True, autoincrement=True)
    remote_source_id = Column(Text, nullable=False)
    gateway_tag = Column(String(32), nullable=False)
    account_ref = Column(Text, nullable=False, index=True)
    card_brand = Column(Text, nullable=True)
    last4 = Column(String(4), nullable=True)
    expiry_month = Column(Integer, nullable=True)
    expiry_year = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CacheEntry(Base):
    """Expiring cache row for remote customer data"""

    __tablename__ = "cache_entry"

    key = Column(String(255), primary_key=True)
    value = Column(JSON, nullable=False)
    expires_at = Column(Float, nullable=False)  # epoch seconds
