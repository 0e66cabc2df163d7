"""
Session Manager

Holds the current identity in an explicit SessionContext that is passed
to whatever needs it (flows, subscriptions), instead of living in a
global.

Lifecycle:
1. start() registers for identity changes; context.loading is True
2. On each change: if signed in and unseeded, seed defaults (a failure
   is logged and ignored), then publish the identity and clear loading
3. stop() unregisters
"""

import asyncio
from typing import Callable, Optional

from walletbook.audit import AuditLogger
from walletbook.models.finance import Identity
from walletbook.session.auth import AuthProviderInterface, Unsubscribe
from walletbook.session.seeding import DefaultDataSeeder


class SessionContext:
    """Current identity plus a loading flag."""

    def __init__(self):
        self.identity: Optional[Identity] = None
        self.loading: bool = True
        self._ready = asyncio.Event()
        self._listeners: list[Callable[["SessionContext"], None]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.uid if self.identity else None

    def listen(self, listener: Callable[["SessionContext"], None]) -> Callable[[], None]:
        """Call `listener` after every identity change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def wait_until_ready(self) -> None:
        """Return once the first identity change has been handled."""
        await self._ready.wait()

    def _set(self, identity: Optional[Identity]) -> None:
        self.identity = identity
        self.loading = False
        self._ready.set()
        for listener in list(self._listeners):
            listener(self)


class SessionManager:
    """Ties the auth provider to a SessionContext and first-login seeding."""

    def __init__(
        self,
        auth_provider: AuthProviderInterface,
        seeder: DefaultDataSeeder,
        audit_logger: Optional[AuditLogger] = None,
        context: Optional[SessionContext] = None,
    ):
        self._auth = auth_provider
        self._seeder = seeder
        self._audit_logger = audit_logger
        self.context = context or SessionContext()
        self._unsubscribe: Optional[Unsubscribe] = None

    async def start(self) -> SessionContext:
        if self._unsubscribe is None:
            self._unsubscribe = await self._auth.on_identity_change(self._handle_identity)
        return self.context

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _handle_identity(self, identity: Optional[Identity]) -> None:
        if identity is not None:
            await self._ensure_seeded(identity.uid)
        self.context._set(identity)

    async def _ensure_seeded(self, user_id: str) -> None:
        """
        Seed defaults for a first-time user.

        Any failure is logged and swallowed: the user continues with an
        empty account and seeding is not retried. Sign-in is never
        blocked by seeding.
        """
        try:
            if not await self._seeder.needs_seeding(user_id):
                return
            categories, wallets = await self._seeder.seed(user_id)
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_seed_failed(user_id, str(e))
            return

        if self._audit_logger:
            await self._audit_logger.log_seed_completed(user_id, categories, wallets)
