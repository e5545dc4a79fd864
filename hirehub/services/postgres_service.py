"""
PostgreSQL Service - Account records.

Accounts are the source of truth for identity; the profile document keeps
denormalized copies of display_name and email (see profile_sync).
"""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from hirehub.core.errors import NotFound, ValidationError
from hirehub.db.postgres import get_db_session
from hirehub.models.account import Account

EMAIL_IN_USE = "Email is already in use"

ACCOUNTS_DDL = """
    CREATE TABLE IF NOT EXISTS accounts (
        account_id SERIAL PRIMARY KEY,
        display_name VARCHAR(100) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        password_hash VARCHAR(255),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""


def _row_to_account(row) -> Account:
    return Account(id=str(row[0]), display_name=row[1], email=row[2], password_hash=row[3])


class AccountRepository:
    """Raw-SQL access to the accounts table."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    def create_table(self) -> None:
        with get_db_session(self.session_factory) as db:
            db.execute(text(ACCOUNTS_DDL))

    def find_by_id(self, account_id: str) -> Optional[Account]:
        try:
            key = int(account_id)
        except (TypeError, ValueError):
            return None
        with get_db_session(self.session_factory) as db:
            result = db.execute(
                text("SELECT account_id, display_name, email, password_hash FROM accounts WHERE account_id = :id"),
                {"id": key}
            )
            row = result.fetchone()
        return _row_to_account(row) if row else None

    def create(self, display_name: str, email: str, password_hash: Optional[str] = None) -> Account:
        try:
            with get_db_session(self.session_factory) as db:
                result = db.execute(
                    text("""
                        INSERT INTO accounts (display_name, email, password_hash)
                        VALUES (:display_name, :email, :password_hash)
                        RETURNING account_id, display_name, email, password_hash
                    """),
                    {"display_name": display_name, "email": email, "password_hash": password_hash}
                )
                row = result.fetchone()
        except IntegrityError as exc:
            raise ValidationError(EMAIL_IN_USE) from exc
        return _row_to_account(row)

    def save(self, account: Account) -> Account:
        """
        Persist display_name and email of an existing account.

        Raises:
            NotFound: no account with this id
            ValidationError: the email belongs to another account
        """
        try:
            with get_db_session(self.session_factory) as db:
                result = db.execute(
                    text("""
                        UPDATE accounts SET display_name = :display_name, email = :email,
                            updated_at = CURRENT_TIMESTAMP
                        WHERE account_id = :id
                    """),
                    {"display_name": account.display_name, "email": account.email, "id": int(account.id)}
                )
                if result.rowcount == 0:
                    raise NotFound("Account not found")
        except IntegrityError as exc:
            raise ValidationError(EMAIL_IN_USE) from exc
        return account
