"""
Client session controller.

Owns the current session of one UI process and keeps it in step with the
identity provider:

    UNINITIALIZED -> LOADING -> AUTHENTICATED(profile) | ANONYMOUS

Every provider notification re-runs reconciliation. Notifications are
queued and handled one at a time by a single worker, in arrival order.
Reconciliation failures end in ANONYMOUS, never in a half-built session.

Usage:
    async with SessionController(provider, reconciler) as controller:
        controller.add_listener(render)
        await controller.sign_in(email, password)
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field

from modules.auth.gate import authorize
from modules.auth.models import Capability
from modules.profiles.interfaces import IProfileReconciler, IProfileStore
from modules.profiles.models import Profile, ProfileUpdateRequest
from modules.profiles.service import ProfileService
from modules.usage.models import UsageEntry
from modules.usage.recorder import UsageRecorder
from shared.exceptions import ModuleHubError
from shared.models import Identity

from .interfaces import IIdentityProvider

logger = logging.getLogger(__name__)

SessionListener = Callable[["Session"], None]


class SessionState(str, Enum):
    """Lifecycle state of the client session."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class Session(BaseModel):
    """Snapshot of the current session. Replaced, never mutated."""

    state: SessionState = Field(default=SessionState.UNINITIALIZED)
    identity: Optional[Identity] = None
    profile: Optional[Profile] = None

    model_config = {"frozen": True}

    @property
    def loading(self) -> bool:
        return self.state in (SessionState.UNINITIALIZED, SessionState.LOADING)

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    @classmethod
    def anonymous(cls) -> "Session":
        return cls(state=SessionState.ANONYMOUS)

    @classmethod
    def authenticated(cls, identity: Identity, profile: Profile) -> "Session":
        return cls(state=SessionState.AUTHENTICATED, identity=identity, profile=profile)


class SessionController:
    """
    Process-wide session holder, passed explicitly to whatever needs it.

    Args:
        provider: Identity provider holding the user's credentials
        reconciler: Maps identities to profiles (same reconciler as the server)
        recorder: Optional usage recorder for ``track_module_usage``
        profile_store: Optional store for ``update_profile``
    """

    def __init__(
        self,
        provider: IIdentityProvider,
        reconciler: IProfileReconciler,
        recorder: Optional[UsageRecorder] = None,
        profile_store: Optional[IProfileStore] = None,
    ):
        self._provider = provider
        self._reconciler = reconciler
        self._recorder = recorder
        self._profiles = ProfileService(profile_store) if profile_store is not None else None

        self._session = Session()
        self._listeners: list[SessionListener] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        # Bumped on sign-out; work tagged with an older value is discarded.
        self._generation = 0

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def profile(self) -> Optional[Profile]:
        return self._session.profile

    @property
    def is_admin(self) -> bool:
        return authorize(self._session.profile, Capability.ADMIN_ONLY).allowed

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        """
        Call ``listener`` with every new session snapshot.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> Session:
        """Subscribe to the provider, then resolve any existing session."""
        if self._worker is not None:
            return self._session

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._set(Session(state=SessionState.LOADING))

        # Subscribing first means a change during the lookup is queued, not lost.
        self._unsubscribe = self._provider.subscribe(self._on_provider_change)

        generation = self._generation
        try:
            identity = await asyncio.to_thread(self._provider.fetch_session)
        except Exception as e:
            logger.warning("Session lookup failed, starting signed out: %s", e)
            identity = None
        await self._apply(identity, generation)

        self._worker = self._loop.create_task(self._process_notifications())
        return self._session

    async def close(self) -> None:
        """Release the provider subscription and stop the worker."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

        if self._recorder is not None:
            await self._recorder.drain()

    async def wait_idle(self) -> None:
        """Wait until every queued notification has been handled."""
        if self._queue is not None:
            await self._queue.join()

    async def __aenter__(self) -> "SessionController":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Account actions
    # -------------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> Session:
        identity = await asyncio.to_thread(
            self._provider.sign_in_with_password, email, password
        )
        await self._apply(identity, self._generation)
        return self._session

    async def sign_up(self, email: str, password: str, full_name: str = "") -> Session:
        """Register; the session stays anonymous while confirmation is pending."""
        identity = await asyncio.to_thread(
            self._provider.sign_up, email, password, full_name
        )
        if identity is not None:
            await self._apply(identity, self._generation)
        return self._session

    async def sign_out(self) -> Session:
        """
        Sign out with the provider, then clear the local session.

        The local session ends up anonymous even when the provider call fails.
        Notifications queued before this point are discarded.
        """
        try:
            await asyncio.to_thread(self._provider.invalidate_session)
        except Exception as e:
            logger.warning("Provider sign-out failed, clearing local session anyway: %s", e)

        self._generation += 1
        self._set(Session.anonymous())
        return self._session

    async def reset_password(self, email: str) -> None:
        await asyncio.to_thread(self._provider.reset_password, email)

    async def update_password(self, password: str) -> None:
        authorize(self._session.profile, Capability.AUTHENTICATED_ONLY).raise_for_denial()
        await asyncio.to_thread(self._provider.update_password, password)

    async def update_profile(self, full_name: str) -> Profile:
        """Change the signed-in user's display name."""
        authorize(self._session.profile, Capability.AUTHENTICATED_ONLY).raise_for_denial()
        if self._profiles is None:
            raise RuntimeError("SessionController was created without a profile store")

        generation = self._generation
        profile = await self._profiles.update_own_profile(
            self._session.profile,
            ProfileUpdateRequest(full_name=full_name),
        )
        if generation == self._generation and self._session.identity is not None:
            self._set(Session.authenticated(self._session.identity, profile))
        return profile

    def track_module_usage(self, entry: UsageEntry) -> None:
        """Record a module run for the signed-in user; no-op when signed out."""
        if self._recorder is None or not self._session.is_authenticated:
            return
        self._recorder.record(self._session.identity, entry)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _on_provider_change(self, event: str, identity: Optional[Identity]) -> None:
        """Provider callback; may run on any thread."""
        if self._loop is None or self._loop.is_closed():
            return
        if _running_loop() is self._loop:
            self._enqueue(event, identity)
            return
        try:
            self._loop.call_soon_threadsafe(self._enqueue, event, identity)
        except RuntimeError:
            logger.debug("Event loop closed; dropping %s notification", event)

    def _enqueue(self, event: str, identity: Optional[Identity]) -> None:
        if self._queue is not None:
            self._queue.put_nowait((self._generation, event, identity))

    async def _process_notifications(self) -> None:
        while True:
            generation, event, identity = await self._queue.get()
            try:
                logger.debug("Handling session change: %s", event)
                await self._apply(identity, generation)
            except Exception:
                logger.exception("Failed to handle session change %s", event)
            finally:
                self._queue.task_done()

    async def _apply(self, identity: Optional[Identity], generation: int) -> None:
        """Reconcile ``identity`` and publish the result unless signed out meanwhile."""
        if identity is None:
            session = Session.anonymous()
        else:
            try:
                profile = await self._reconciler.reconcile(identity)
            except ModuleHubError as e:
                logger.warning("Reconciliation failed for %s, signing out locally: %s", identity.id, e.code)
                session = Session.anonymous()
            except Exception:
                logger.exception("Unexpected reconciliation error for %s, signing out locally", identity.id)
                session = Session.anonymous()
            else:
                session = Session.authenticated(identity, profile)

        if generation != self._generation:
            logger.debug("Discarding session update from before sign-out")
            return
        self._set(session)

    def _set(self, session: Session) -> None:
        self._session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed")


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
