"""
Tests for the session manager and first-login seeding.
"""

import asyncio

import pytest

from conftest import FailingStore
from walletbook.audit import AuditLogger
from walletbook.models.audit import AuditEventType
from walletbook.models.finance import TransactionType
from walletbook.repositories import CategoryRepository, WalletRepository
from walletbook.session import (
    DEFAULT_CATEGORIES,
    DefaultDataSeeder,
    SessionContext,
    SessionManager,
    friendly_auth_message,
)


def make_manager(store, auth_provider, audit_logger=None):
    categories = CategoryRepository(store)
    wallets = WalletRepository(store)
    manager = SessionManager(
        auth_provider,
        DefaultDataSeeder(categories, wallets),
        audit_logger,
    )
    return manager, categories, wallets


class BrokenSeeder(DefaultDataSeeder):
    async def seed(self, user_id):
        raise ValueError("unexpected payload")


class TestDefaultCategories:
    """Tests for the default category set."""

    def test_thirteen_categories(self):
        assert len(DEFAULT_CATEGORIES) == 13

    def test_split_by_type(self):
        income = [c for c in DEFAULT_CATEGORIES if c.type == TransactionType.INCOME]
        expense = [c for c in DEFAULT_CATEGORIES if c.type == TransactionType.EXPENSE]
        assert len(income) == 4
        assert len(expense) == 9

    def test_every_category_has_icon_and_color(self):
        assert all(c.icon and c.color for c in DEFAULT_CATEGORIES)


class TestSessionContext:
    """Tests for SessionContext."""

    def test_starts_loading(self):
        context = SessionContext()
        assert context.loading is True
        assert context.is_authenticated is False
        assert context.user_id is None

    @pytest.mark.asyncio
    async def test_listener_and_removal(self):
        context = SessionContext()
        seen = []
        remove = context.listen(lambda ctx: seen.append(ctx.loading))

        context._set(None)
        remove()
        context._set(None)

        assert seen == [False]


class TestSessionManager:
    """Tests for identity tracking and seeding."""

    @pytest.mark.asyncio
    async def test_start_signed_out(self, store, auth_provider):
        manager, _, _ = make_manager(store, auth_provider)

        context = await manager.start()

        assert context.loading is False
        assert context.is_authenticated is False

    @pytest.mark.asyncio
    async def test_registration_seeds_defaults(self, store, auth_provider):
        manager, categories, wallets = make_manager(store, auth_provider)
        await manager.start()

        identity = await auth_provider.sign_up("ana@example.com", "secret1")

        assert manager.context.user_id == identity.uid
        assert len(await categories.list_all(identity.uid)) == 13
        seeded_wallets = await wallets.list_all(identity.uid)
        assert [(w.name, w.balance) for w in seeded_wallets] == [("Cash", 0)]

    @pytest.mark.asyncio
    async def test_returning_user_not_reseeded(self, store, auth_provider):
        manager, categories, wallets = make_manager(store, auth_provider)
        await manager.start()
        identity = await auth_provider.sign_up("ana@example.com", "secret1")
        await auth_provider.sign_out()

        await auth_provider.sign_in("ana@example.com", "secret1")

        assert len(await categories.list_all(identity.uid)) == 13
        assert len(await wallets.list_all(identity.uid)) == 1

    @pytest.mark.asyncio
    async def test_sign_out_clears_identity(self, store, auth_provider):
        manager, _, _ = make_manager(store, auth_provider)
        await manager.start()
        await auth_provider.sign_up("ana@example.com", "secret1")

        await auth_provider.sign_out()

        assert manager.context.identity is None
        assert manager.context.loading is False

    @pytest.mark.asyncio
    async def test_seed_failure_still_signs_in(self, auth_provider):
        store = FailingStore({("create_many", "/categories")})
        audit_logger = AuditLogger()
        manager, categories, wallets = make_manager(store, auth_provider, audit_logger)
        await manager.start()

        identity = await auth_provider.sign_up("ana@example.com", "secret1")

        assert manager.context.user_id == identity.uid
        assert await categories.list_all(identity.uid) == []
        assert await wallets.list_all(identity.uid) == []
        event_types = [e.event_type for e in audit_logger.recent_events]
        assert AuditEventType.SEED_FAILED in event_types
        assert AuditEventType.SEED_COMPLETED not in event_types

    @pytest.mark.asyncio
    async def test_unexpected_seed_error_still_finishes_loading(self, store, auth_provider):
        """Errors outside the storage hierarchy don't leave the session loading."""
        audit_logger = AuditLogger()
        categories = CategoryRepository(store)
        seeder = BrokenSeeder(categories, WalletRepository(store))
        manager = SessionManager(auth_provider, seeder, audit_logger)
        await manager.start()

        identity = await auth_provider.sign_up("ana@example.com", "secret1")

        assert manager.context.loading is False
        assert manager.context.user_id == identity.uid
        failed = [
            e for e in audit_logger.recent_events
            if e.event_type == AuditEventType.SEED_FAILED
        ]
        assert len(failed) == 1
        assert "unexpected payload" in failed[0].error_message

    @pytest.mark.asyncio
    async def test_seed_success_is_audited(self, store, auth_provider):
        audit_logger = AuditLogger()
        manager, _, _ = make_manager(store, auth_provider, audit_logger)
        await manager.start()

        await auth_provider.sign_up("ana@example.com", "secret1")

        completed = [
            e for e in audit_logger.recent_events
            if e.event_type == AuditEventType.SEED_COMPLETED
        ]
        assert len(completed) == 1

    @pytest.mark.asyncio
    async def test_stop_unregisters(self, store, auth_provider):
        manager, categories, _ = make_manager(store, auth_provider)
        await manager.start()
        manager.stop()

        identity = await auth_provider.sign_up("ana@example.com", "secret1")

        assert manager.context.identity is None
        assert await categories.list_all(identity.uid) == []

    @pytest.mark.asyncio
    async def test_wait_until_ready(self, store, auth_provider):
        manager, _, _ = make_manager(store, auth_provider)

        waiter = asyncio.create_task(manager.context.wait_until_ready())
        await asyncio.sleep(0)
        assert not waiter.done()

        await manager.start()
        await asyncio.wait_for(waiter, timeout=1)


class TestFriendlyAuthMessage:
    """Tests for provider error code translation."""

    def test_sign_in_codes(self):
        assert friendly_auth_message("auth/user-not-found") == "No account found with this email"
        assert friendly_auth_message("auth/wrong-password") == "Incorrect password"

    def test_register_codes(self):
        assert (
            friendly_auth_message("auth/email-already-in-use", "register")
            == "An account with this email already exists"
        )

    def test_unknown_code_falls_back(self):
        assert friendly_auth_message("auth/network", "sign_in") == "Failed to sign in. Please try again."
        assert (
            friendly_auth_message("auth/network", "register")
            == "Failed to create account. Please try again."
        )
