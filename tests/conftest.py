"""
Shared test fixtures and utilities.

This module provides in-memory stand-ins for Supabase (profile store, usage
store, token verifier, session-holding identity provider) used across all
test modules.
"""

import itertools
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import pytest

from api.dependencies import reset_container
from modules.auth.exceptions import InvalidCredentialError, MissingCredentialError
from modules.profiles.exceptions import (
    ProfileFetchError,
    ProfileNotFoundError,
    ProfileStoreError,
)
from modules.profiles.models import Profile, ProfileDraft, Role
from modules.usage.exceptions import UsageStoreError
from modules.usage.models import UsageEntry, UsageOwner, UsageRecord
from shared.config import get_settings
from shared.models import Identity

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class InMemoryProfileStore:
    """
    Thread-safe profile store with ON CONFLICT (id) DO NOTHING upserts.

    ``fetch_errors`` / ``upsert_errors`` make the next N calls fail.
    ``stale_reads`` makes the next N fetches miss rows that exist, which is
    how two concurrent first-sights look to each other.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._clock = itertools.count()
        self.rows: dict[str, Profile] = {}
        self.fetch_calls = 0
        self.upsert_calls = 0
        self.inserts = 0
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.fetch_errors = 0
        self.upsert_errors = 0
        self.stale_reads = 0

    def add(self, profile_id: str, role: Role = Role.USER, **fields: Any) -> Profile:
        profile = Profile(
            id=profile_id,
            email=fields.pop("email", f"{profile_id}@example.com"),
            full_name=fields.pop("full_name", profile_id.title()),
            role=role,
            created_at=fields.pop("created_at", self._now()),
            **fields,
        )
        self.rows[profile_id] = profile
        return profile

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        with self._lock:
            self.fetch_calls += 1
            if self.fetch_errors:
                self.fetch_errors -= 1
                raise ProfileFetchError(profile_id, "connection reset")
            if self.stale_reads:
                self.stale_reads -= 1
                return None
            return self.rows.get(profile_id)

    def upsert(self, draft: ProfileDraft) -> Optional[Profile]:
        with self._lock:
            self.upsert_calls += 1
            if self.upsert_errors:
                self.upsert_errors -= 1
                raise ProfileStoreError("upsert", "duplicate key value violates unique constraint")
            if draft.id in self.rows:
                return None
            profile = Profile(**draft.model_dump(), created_at=self._now())
            self.rows[draft.id] = profile
            self.inserts += 1
            return profile

    def update(self, profile_id: str, fields: dict[str, Any]) -> Profile:
        with self._lock:
            if profile_id not in self.rows:
                raise ProfileNotFoundError(profile_id)
            self.updates.append((profile_id, dict(fields)))
            updated = self.rows[profile_id].model_copy(
                update={**fields, "updated_at": self._now()}
            )
            # model_copy skips validation; keep role an enum
            updated = Profile(**updated.model_dump())
            self.rows[profile_id] = updated
            return updated

    def list_profiles(self) -> list[Profile]:
        with self._lock:
            return sorted(self.rows.values(), key=lambda p: p.created_at, reverse=True)

    def _now(self) -> datetime:
        return BASE_TIME + timedelta(minutes=next(self._clock))


class InMemoryUsageStore:
    """Append-only usage store. Set ``fail_inserts`` to make writes fail."""

    def __init__(self, profiles: Optional[InMemoryProfileStore] = None) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._profiles = profiles
        self.records: list[UsageRecord] = []
        self.insert_calls = 0
        self.fail_inserts = False

    def insert(self, user_id: str, entry: UsageEntry) -> UsageRecord:
        with self._lock:
            self.insert_calls += 1
            if self.fail_inserts:
                raise UsageStoreError("track", "relation module_usage is unavailable")
            record = UsageRecord(
                id=f"rec-{next(self._ids)}",
                user_id=user_id,
                module_name=entry.module_name,
                input_data=entry.input_data,
                output_data=entry.output_data,
                processing_time_ms=entry.processing_time_ms,
                status=entry.status,
                created_at=datetime.now(timezone.utc),
            )
            self.records.append(record)
            return record

    def add(self, user_id: str, module_name: str, created_at: datetime, **fields: Any) -> UsageRecord:
        record = UsageRecord(
            id=f"rec-{next(self._ids)}",
            user_id=user_id,
            module_name=module_name,
            created_at=created_at,
            **fields,
        )
        self.records.append(record)
        return record

    def list_for_user(
        self,
        user_id: str,
        limit: int = 10,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> list[UsageRecord]:
        rows = [
            r for r in self.records
            if r.user_id == user_id
            and (since is None or r.created_at >= since)
            and (until is None or r.created_at < until)
        ]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows[:limit]

    def list_all(self, limit: int = 100) -> list[UsageRecord]:
        rows = sorted(self.records, key=lambda r: r.created_at, reverse=True)[:limit]
        if self._profiles is None:
            return rows
        joined = []
        for record in rows:
            owner = self._profiles.rows.get(record.user_id)
            if owner is not None:
                record = record.model_copy(
                    update={"owner": UsageOwner(email=owner.email, full_name=owner.full_name)}
                )
            joined.append(record)
        return joined


class FakeCredentialVerifier:
    """Accepts only the tokens it was given; records every call."""

    def __init__(self) -> None:
        self.tokens: dict[str, Identity] = {}
        self.calls: list[str] = []

    def issue(self, identity: Identity, token: Optional[str] = None) -> str:
        token = token or f"token-{identity.id}"
        self.tokens[token] = identity
        return token

    async def verify(self, token: str) -> Identity:
        self.calls.append(token)
        if not token:
            raise MissingCredentialError()
        if token not in self.tokens:
            raise InvalidCredentialError()
        return self.tokens[token]


class FakeIdentityProvider:
    """Session-holding provider whose notifications tests trigger by hand."""

    def __init__(self, identity: Optional[Identity] = None) -> None:
        self.identity = identity
        self.callbacks: list[Callable[[str, Optional[Identity]], None]] = []
        self.accounts: dict[str, tuple[str, Identity]] = {}
        self.invalidate_calls = 0
        self.invalidate_error: Optional[Exception] = None
        self.fetch_error: Optional[Exception] = None
        self.password_resets: list[str] = []
        self.passwords: list[str] = []

    def fetch_session(self) -> Optional[Identity]:
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.identity

    def subscribe(self, callback):
        self.callbacks.append(callback)

        def unsubscribe() -> None:
            self.callbacks.remove(callback)

        return unsubscribe

    def emit(self, event: str, identity: Optional[Identity]) -> None:
        for callback in list(self.callbacks):
            callback(event, identity)

    def invalidate_session(self) -> None:
        self.invalidate_calls += 1
        if self.invalidate_error is not None:
            raise self.invalidate_error
        self.identity = None

    def sign_in_with_password(self, email: str, password: str) -> Identity:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise InvalidCredentialError("Invalid email or password")
        self.identity = account[1]
        return self.identity

    def sign_up(self, email: str, password: str, full_name: str = "") -> Optional[Identity]:
        identity = Identity(
            id=f"new-{len(self.accounts) + 1}",
            email=email,
            metadata={"full_name": full_name},
        )
        self.accounts[email] = (password, identity)
        self.identity = identity
        return identity

    def reset_password(self, email: str) -> None:
        self.password_resets.append(email)

    def update_password(self, password: str) -> None:
        self.passwords.append(password)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def usage_store(profile_store) -> InMemoryUsageStore:
    return InMemoryUsageStore(profile_store)


@pytest.fixture
def verifier() -> FakeCredentialVerifier:
    return FakeCredentialVerifier()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def ann() -> Identity:
    """A never-seen identity with a display name in its metadata."""
    return Identity(id="u1", email="a@x.com", metadata={"full_name": "Ann"})


@pytest.fixture
def user_profile() -> Profile:
    return Profile(id="user-1", email="user@example.com", full_name="Uma User", role=Role.USER)


@pytest.fixture
def admin_profile() -> Profile:
    return Profile(id="admin-1", email="admin@example.com", full_name="Ada Admin", role=Role.ADMIN)
