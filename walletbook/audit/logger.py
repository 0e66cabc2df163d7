"""
Audit Logger

DESIGN DECISION: Every money-moving step in the system is logged.
This provides:
1. Traceability of every wallet balance change
2. A record of balance writes that were skipped or interrupted
3. Debugging capability when a balance drifts

The audit logger:
- Is async so it can sit inline in ledger coroutines
- Never raises into the caller (a logging failure must not fail a write)
- Supports correlation IDs to tie the steps of one ledger operation together
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from walletbook.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log. Recent events are also kept
    in memory (bounded) so a session can show what just happened.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("walletbook.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Most recent events, oldest first."""
        return list(self._history)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written to the local log.
        """
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[: len(self._history) - self._history_size]

        log_dict = event.to_log_dict()
        try:
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Logging must never break a ledger operation
            return False

        return True

    async def log_transaction_created(
        self,
        user_id: str,
        transaction_id: str,
        tx_type: str,
        amount: int,
        wallet_id: str,
        correlation_id: UUID,
    ) -> None:
        """Log a new transaction document."""
        event = AuditEventBuilder.transaction_created(
            user_id=user_id,
            transaction_id=transaction_id,
            tx_type=tx_type,
            amount=amount,
            wallet_id=wallet_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_amended(
        self,
        user_id: str,
        transaction_id: str,
        changed_fields: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log a transaction patch."""
        event = AuditEventBuilder.transaction_amended(
            user_id=user_id,
            transaction_id=transaction_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_deleted(
        self,
        user_id: str,
        transaction_id: str,
        tx_type: str,
        amount: int,
        wallet_id: str,
        correlation_id: UUID,
    ) -> None:
        """Log a transaction deletion."""
        event = AuditEventBuilder.transaction_deleted(
            user_id=user_id,
            transaction_id=transaction_id,
            tx_type=tx_type,
            amount=amount,
            wallet_id=wallet_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_balance_adjusted(
        self,
        user_id: str,
        wallet_id: str,
        previous_balance: int,
        new_balance: int,
        correlation_id: UUID,
    ) -> None:
        """Log a wallet balance write."""
        event = AuditEventBuilder.balance_adjusted(
            user_id=user_id,
            wallet_id=wallet_id,
            previous_balance=previous_balance,
            new_balance=new_balance,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_balance_write_skipped(
        self,
        user_id: str,
        wallet_id: str,
        delta: int,
        correlation_id: UUID,
    ) -> None:
        """Log a balance change that had no wallet to land on."""
        event = AuditEventBuilder.balance_write_skipped(
            user_id=user_id,
            wallet_id=wallet_id,
            delta=delta,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_wallet_saved(self, user_id: str, wallet_id: str, name: str) -> None:
        await self.log(AuditEventBuilder.wallet_saved(user_id, wallet_id, name))

    async def log_wallet_deleted(self, user_id: str, wallet_id: str) -> None:
        await self.log(AuditEventBuilder.wallet_deleted(user_id, wallet_id))

    async def log_auth_succeeded(self, user_id: str, flow: str) -> None:
        await self.log(AuditEventBuilder.auth_succeeded(user_id, flow))

    async def log_auth_failed(self, flow: str, error_code: str, error_message: str) -> None:
        await self.log(AuditEventBuilder.auth_failed(flow, error_code, error_message))

    async def log_seed_completed(self, user_id: str, categories: int, wallets: int) -> None:
        """Log first-login seeding."""
        event = AuditEventBuilder.seed_completed(
            user_id=user_id,
            categories=categories,
            wallets=wallets,
        )
        await self.log(event)

    async def log_seed_failed(self, user_id: str, error_message: str) -> None:
        """Log a seeding failure. Sign-in continues regardless."""
        event = AuditEventBuilder.seed_failed(
            user_id=user_id,
            error_message=error_message,
        )
        await self.log(event)

    async def log_validation_failed(self, form: str, issues: list[dict]) -> None:
        await self.log(AuditEventBuilder.validation_failed(form, issues))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a store failure caught at an action boundary."""
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            user_id=user_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a ledger operation and pass it
    through each of its document writes.
    """
    return uuid4()
