"""Shared fixtures: in-memory repositories and a store rooted in tmp_path."""

import copy
from typing import Dict, Optional

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hirehub.core.config import Settings
from hirehub.core.errors import ConcurrentUpdateError, NotFound, StorageError
from hirehub.models.account import Account
from hirehub.models.profile import Profile
from hirehub.services.asset_manager import ProfileAssetManager
from hirehub.services.object_store import LocalObjectStore
from hirehub.services.postgres_service import AccountRepository
from hirehub.services.profile_sync import ProfileSyncService
from hirehub.services.project_service import ProjectService
from hirehub.utils.file_upload import IncomingFile

ACCOUNT_ID = "1"
OTHER_ACCOUNT_ID = "2"
BASE_URL = "http://testserver"

# Same columns as ACCOUNTS_DDL, with SQLite's autoincrement spelling
SQLITE_ACCOUNTS_DDL = """
    CREATE TABLE accounts (
        account_id INTEGER PRIMARY KEY AUTOINCREMENT,
        display_name VARCHAR(100) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        password_hash VARCHAR(255),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""


class FakeProfileRepository:
    """Stores deep copies, checks versions the same way the Mongo repository does."""

    def __init__(self):
        self.docs: Dict[str, Profile] = {}
        self.pending_conflicts = 0
        self.fail_saves: Optional[Exception] = None
        self.save_calls = 0
        self._next_id = 1

    def find_by_account(self, account_id: str) -> Optional[Profile]:
        stored = self.docs.get(account_id)
        return copy.deepcopy(stored) if stored is not None else None

    def insert(self, profile: Profile) -> Profile:
        if profile.account_id in self.docs:
            return self.find_by_account(profile.account_id)
        profile.id = f"profile-{self._next_id}"
        profile.version = 0
        self._next_id += 1
        self.docs[profile.account_id] = copy.deepcopy(profile)
        return profile

    def save(self, profile: Profile) -> Profile:
        self.save_calls += 1
        if self.fail_saves is not None:
            raise self.fail_saves
        if self.pending_conflicts > 0:
            self.pending_conflicts -= 1
            raise ConcurrentUpdateError()
        if profile.id is None:
            return self.insert(profile)
        stored = self.docs.get(profile.account_id)
        if stored is None or stored.version != profile.version:
            raise ConcurrentUpdateError()
        profile.version += 1
        self.docs[profile.account_id] = copy.deepcopy(profile)
        return profile

    def ensure_indexes(self) -> None:
        pass


class FakeAccountRepository:
    def __init__(self):
        self.accounts: Dict[str, Account] = {}
        self.fail_saves: Optional[Exception] = None

    def add(self, account_id: str, display_name: str, email: str) -> Account:
        account = Account(id=account_id, display_name=display_name, email=email)
        self.accounts[account_id] = account
        return account

    def find_by_id(self, account_id: str) -> Optional[Account]:
        account = self.accounts.get(account_id)
        return account.model_copy() if account is not None else None

    def save(self, account: Account) -> Account:
        if self.fail_saves is not None:
            raise self.fail_saves
        if account.id not in self.accounts:
            raise NotFound("Account not found")
        self.accounts[account.id] = account.model_copy()
        return account


class FlakyObjectStore(LocalObjectStore):
    """LocalObjectStore with switchable failures."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.fail_put_after: Optional[int] = None
        self.fail_delete = False
        self.puts = 0
        self.deleted_keys = []

    async def put(self, stream, content_type, *, category, owner_id, original_filename):
        if self.fail_put_after is not None and self.puts >= self.fail_put_after:
            raise StorageError("Could not store uploaded file")
        self.puts += 1
        return await super().put(
            stream, content_type, category=category, owner_id=owner_id, original_filename=original_filename
        )

    async def delete(self, key):
        if self.fail_delete:
            raise StorageError("disk unavailable")
        self.deleted_keys.append(key)
        return await super().delete(key)


def make_file(name="resume.pdf", content_type="application/pdf", size=2048, fill=b"x") -> IncomingFile:
    return IncomingFile(filename=name, content_type=content_type, data=fill * size)


def stored_files(store: LocalObjectStore):
    """Keys of every object currently on disk (temp files excluded)."""
    return sorted(
        str(path.relative_to(store.root)).replace("\\", "/")
        for path in store.root.rglob("*")
        if path.is_file() and not path.name.startswith(".upload-")
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        upload_dir=str(tmp_path / "uploads"),
        public_base_url=BASE_URL,
        uploads_url_prefix="/uploads",
        jwt_secret_key="test-secret",
    )


@pytest.fixture
def store(settings):
    return FlakyObjectStore(
        root_dir=settings.upload_dir,
        base_url=settings.uploads_base_url,
        url_prefix=settings.uploads_url_prefix,
    )


@pytest.fixture
def profiles():
    return FakeProfileRepository()


@pytest.fixture
def accounts():
    repo = FakeAccountRepository()
    repo.add(ACCOUNT_ID, "Ada Lovelace", "ada@example.com")
    repo.add(OTHER_ACCOUNT_ID, "Grace Hopper", "grace@example.com")
    return repo


@pytest.fixture
def assets(profiles, accounts, store, settings):
    return ProfileAssetManager(profiles=profiles, accounts=accounts, store=store, settings=settings)


@pytest.fixture
def projects(assets):
    return ProjectService(assets)


@pytest.fixture
def sync(assets):
    return ProfileSyncService(assets)


@pytest.fixture
def sqlite_accounts():
    """AccountRepository on an in-memory SQLite database."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    with engine.begin() as conn:
        conn.execute(text(SQLITE_ACCOUNTS_DDL))
    return AccountRepository(sessionmaker(bind=engine))
