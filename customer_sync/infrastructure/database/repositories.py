"""Data access layer for accounts and payment tokens"""

from typing import List, Optional
from sqlalchemy.orm import Session
from customer_sync.infrastructure.database.models import AccountMeta, PaymentToken, UserAccount
from customer_sync.domain.models import LocalToken


class AccountRepository:
    """Repository for local accounts and their key/value metadata"""

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, account_ref: str, email: str) -> UserAccount:
        db_account = UserAccount(id=account_ref, email=email)
        self.db.add(db_account)
        self.db.flush()
        return db_account

    def get_email(self, account_ref: str) -> str:
        db_account = self.db.get(UserAccount, account_ref)
        return db_account.email if db_account else ""

    def _get_meta_row(self, account_ref: str, key: str) -> Optional[AccountMeta]:
        return (
            self.db.query(AccountMeta)
            .filter(AccountMeta.account_ref == account_ref, AccountMeta.key == key)
            .first()
        )

    def get_meta(self, account_ref: str, key: str) -> str:
        """Stored value, or an empty string when the key is unset"""
        row = self._get_meta_row(account_ref, key)
        return row.value if row else ""

    def set_meta(self, account_ref: str, key: str, value: str) -> None:
        row = self._get_meta_row(account_ref, key)
        if row is None:
            self.db.add(AccountMeta(account_ref=account_ref, key=key, value=value))
        else:
            row.value = value
        self.db.flush()

    def delete_meta(self, account_ref: str, key: str) -> None:
        row = self._get_meta_row(account_ref, key)
        if row is not None:
            self.db.delete(row)
            self.db.flush()


class TokenRepository:
    """Repository for locally persisted payment tokens"""

    def __init__(self, db: Session):
        self.db = db

    def create_token(self, token: LocalToken) -> None:
        """Persist a token projected from an attached payment source"""
        self.db.add(
            PaymentToken(
                remote_source_id=token.remote_source_id,
                gateway_tag=token.gateway_tag,
                account_ref=token.owner_account_ref,
                card_brand=token.card_brand,
                last4=token.last4,
                expiry_month=token.expiry_month,
                expiry_year=token.expiry_year,
            )
        )
        self.db.flush()

    def list_tokens(self, account_ref: str) -> List[LocalToken]:
        rows = (
            self.db.query(PaymentToken)
            .filter(PaymentToken.account_ref == account_ref)
            .order_by(PaymentToken.id)
            .all()
        )
        return [
            LocalToken(
                remote_source_id=row.remote_source_id,
                gateway_tag=row.gateway_tag,
                owner_account_ref=row.account_ref,
                card_brand=row.card_brand,
                last4=row.last4,
                expiry_month=row.expiry_month,
                expiry_year=row.expiry_year,
            )
            for row in rows
        ]
