"""
Account record - owned by the PostgreSQL accounts table.
"""

from typing import Optional

from pydantic import BaseModel


class Account(BaseModel):
    id: str
    display_name: str
    email: str
    password_hash: Optional[str] = None
