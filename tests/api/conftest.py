"""
Fixtures for API tests.

Routes run against the in-memory stores through FastAPI dependency
overrides; nothing talks to Supabase.
"""

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.dependencies import (
    get_credential_verifier,
    get_profile_reconciler,
    get_profile_service,
    get_usage_recorder,
    get_usage_service,
)
from modules.profiles.models import Role
from modules.profiles.reconciler import ProfileReconciler
from modules.profiles.service import ProfileService
from modules.usage.recorder import UsageRecorder
from modules.usage.service import UsageService
from shared.models import Identity


@pytest.fixture
def recorder(usage_store):
    return UsageRecorder(usage_store)


@pytest.fixture
def client(profile_store, usage_store, verifier, recorder):
    """Test client wired to in-memory stores."""
    usage = UsageService(usage_store)
    app.dependency_overrides[get_credential_verifier] = lambda: verifier
    app.dependency_overrides[get_profile_reconciler] = lambda: ProfileReconciler(profile_store)
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(profile_store, usage=usage)
    app.dependency_overrides[get_usage_service] = lambda: usage
    app.dependency_overrides[get_usage_recorder] = lambda: recorder

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _headers(verifier, profile_store, profile_id: str, role: Role) -> dict[str, str]:
    profile = profile_store.add(profile_id, role=role)
    token = verifier.issue(Identity(id=profile.id, email=profile.email))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(verifier, profile_store) -> dict[str, str]:
    """Bearer header for an existing role=user profile ``user-1``."""
    return _headers(verifier, profile_store, "user-1", Role.USER)


@pytest.fixture
def admin_headers(verifier, profile_store) -> dict[str, str]:
    """Bearer header for an existing role=admin profile ``admin-1``."""
    return _headers(verifier, profile_store, "admin-1", Role.ADMIN)
