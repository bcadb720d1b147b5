import asyncio

import pytest

from modules.profiles.exceptions import ProfileReconciliationError
from modules.profiles.models import Profile, Role
from modules.profiles.reconciler import ProfileReconciler


@pytest.fixture
def reconciler(profile_store):
    return ProfileReconciler(profile_store)


class TestReconcileFirstSight:
    @pytest.mark.asyncio
    async def test_creates_user_profile(self, reconciler, profile_store, ann):
        """A never-seen identity gets a role=user profile from its metadata."""
        profile = await reconciler.reconcile(ann)

        assert profile.id == "u1"
        assert profile.email == "a@x.com"
        assert profile.full_name == "Ann"
        assert profile.role == Role.USER
        assert profile_store.rows["u1"] == profile
        assert profile_store.inserts == 1

    @pytest.mark.asyncio
    async def test_missing_full_name_is_empty(self, reconciler, ann):
        identity = ann.model_copy(update={"metadata": {}})
        profile = await reconciler.reconcile(identity)
        assert profile.full_name == ""


class TestReconcileExisting:
    @pytest.mark.asyncio
    async def test_returns_existing_profile_unchanged(self, reconciler, profile_store, ann):
        existing = profile_store.add("u1", role=Role.ADMIN, full_name="Ann Admin")

        profile = await reconciler.reconcile(ann)

        assert profile == existing
        assert profile_store.upsert_calls == 0

    @pytest.mark.asyncio
    async def test_second_call_is_read_only(self, reconciler, profile_store, ann):
        first = await reconciler.reconcile(ann)
        second = await reconciler.reconcile(ann)

        assert first == second
        assert profile_store.inserts == 1
        assert profile_store.upsert_calls == 1

    @pytest.mark.asyncio
    async def test_never_demotes_existing_admin(self, reconciler, profile_store, ann):
        """A stale read before the upsert must not overwrite the stored role."""
        profile_store.add("u1", role=Role.ADMIN)
        profile_store.stale_reads = 1

        profile = await reconciler.reconcile(ann)

        assert profile.role == Role.ADMIN
        assert profile_store.rows["u1"].role == Role.ADMIN


class TestReconcileConcurrently:
    @pytest.mark.asyncio
    async def test_two_first_sights_converge(self, reconciler, profile_store, ann):
        """Both callers miss on fetch; only one row is written."""
        profile_store.stale_reads = 2

        first, second = await asyncio.gather(
            reconciler.reconcile(ann),
            reconciler.reconcile(ann),
        )

        assert first == second
        assert list(profile_store.rows) == ["u1"]
        assert profile_store.inserts == 1

    @pytest.mark.asyncio
    async def test_many_callers_one_row(self, profile_store, ann):
        callers = [ProfileReconciler(profile_store) for _ in range(10)]

        profiles = await asyncio.gather(*(c.reconcile(ann) for c in callers))

        assert len({p.id for p in profiles}) == 1
        assert len(profile_store.rows) == 1
        assert profile_store.inserts == 1


class TestReconcileFailures:
    @pytest.mark.asyncio
    async def test_fetch_error_falls_through_to_upsert(self, reconciler, profile_store, ann):
        profile_store.fetch_errors = 1

        profile = await reconciler.reconcile(ann)

        assert profile.id == "u1"
        assert profile_store.inserts == 1

    @pytest.mark.asyncio
    async def test_upsert_error_retries_fetch(self, reconciler, profile_store, ann):
        """A failed upsert whose row exists anyway is recovered by the retry."""
        profile_store.add("u1")
        profile_store.stale_reads = 1
        profile_store.upsert_errors = 1

        profile = await reconciler.reconcile(ann)

        assert profile.id == "u1"
        assert profile_store.fetch_calls == 2

    @pytest.mark.asyncio
    async def test_fails_when_no_row_can_be_obtained(self, reconciler, profile_store, ann):
        profile_store.upsert_errors = 1

        with pytest.raises(ProfileReconciliationError) as exc_info:
            await reconciler.reconcile(ann)

        assert exc_info.value.message == "Failed to create user profile"
        assert profile_store.rows == {}

    @pytest.mark.asyncio
    async def test_fails_when_store_is_down(self, reconciler, profile_store, ann):
        profile_store.fetch_errors = 2
        profile_store.upsert_errors = 1

        with pytest.raises(ProfileReconciliationError):
            await reconciler.reconcile(ann)

    @pytest.mark.asyncio
    async def test_never_fabricates_a_profile(self, ann):
        """Conflict reported but the row is not readable: failure, not a local profile."""

        class ConflictingStore:
            def get_by_id(self, profile_id):
                return None

            def upsert(self, draft):
                return None

        with pytest.raises(ProfileReconciliationError):
            await ProfileReconciler(ConflictingStore()).reconcile(ann)

    @pytest.mark.asyncio
    async def test_returns_persisted_row(self, reconciler, profile_store, ann):
        profile = await reconciler.reconcile(ann)
        assert isinstance(profile, Profile)
        assert profile.created_at is not None
