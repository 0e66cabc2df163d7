"""
Audit Models for Walletbook

Every mutation that touches money is logged for audit purposes.
This provides:
1. Traceability of every balance change
2. Visibility into balance writes that were skipped
3. Debugging information when a write sequence is interrupted

DESIGN DECISION: The ledger writes are not atomic. The audit trail is
how a stale balance gets noticed, so every step is its own event.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_AMENDED = "transaction_amended"
    TRANSACTION_DELETED = "transaction_deleted"

    # Balance maintenance
    BALANCE_ADJUSTED = "balance_adjusted"
    BALANCE_WRITE_SKIPPED = "balance_write_skipped"

    # Wallets and categories
    WALLET_SAVED = "wallet_saved"
    WALLET_DELETED = "wallet_deleted"

    # Session
    SIGN_IN_SUCCEEDED = "sign_in_succeeded"
    SIGN_IN_FAILED = "sign_in_failed"
    REGISTRATION_SUCCEEDED = "registration_succeeded"
    REGISTRATION_FAILED = "registration_failed"
    SEED_COMPLETED = "seed_completed"
    SEED_FAILED = "seed_failed"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - whose data, which entity
    user_id: Optional[str] = Field(
        default=None,
        description="Owner of the affected documents"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'wallet')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Document ID of the entity this event relates to"
    )

    # Correlation - for tracking the steps of one ledger operation
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a document write and its balance writes)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_created(user_id, tx_id, ...)
        event = AuditEventBuilder.balance_write_skipped(user_id, wallet_id, ...)
    """

    @staticmethod
    def transaction_created(
        user_id: str,
        transaction_id: str,
        tx_type: str,
        amount: int,
        wallet_id: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction recorded: {tx_type} {amount}",
            details={
                "type": tx_type,
                "amount": amount,
                "wallet_id": wallet_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_amended(
        user_id: str,
        transaction_id: str,
        changed_fields: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_AMENDED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction amended: {', '.join(changed_fields) or 'no fields'}",
            details={
                "changed_fields": changed_fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        user_id: str,
        transaction_id: str,
        tx_type: str,
        amount: int,
        wallet_id: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction deleted: {tx_type} {amount}",
            details={
                "type": tx_type,
                "amount": amount,
                "wallet_id": wallet_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def balance_adjusted(
        user_id: str,
        wallet_id: str,
        previous_balance: int,
        new_balance: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_ADJUSTED,
            user_id=user_id,
            entity_type="wallet",
            entity_id=wallet_id,
            correlation_id=correlation_id,
            description=f"Wallet balance {previous_balance} -> {new_balance}",
            details={
                "previous_balance": previous_balance,
                "new_balance": new_balance,
                "delta": new_balance - previous_balance,
            },
        )

    @staticmethod
    def balance_write_skipped(
        user_id: str,
        wallet_id: str,
        delta: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_WRITE_SKIPPED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type="wallet",
            entity_id=wallet_id,
            correlation_id=correlation_id,
            description="Wallet not found; balance change was not recorded",
            details={
                "delta": delta,
            },
        )

    @staticmethod
    def wallet_saved(user_id: str, wallet_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WALLET_SAVED,
            user_id=user_id,
            entity_type="wallet",
            entity_id=wallet_id,
            description=f"Wallet saved: {name}",
            is_user_action=True,
        )

    @staticmethod
    def wallet_deleted(user_id: str, wallet_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WALLET_DELETED,
            user_id=user_id,
            entity_type="wallet",
            entity_id=wallet_id,
            description="Wallet deleted (transactions kept)",
            is_user_action=True,
        )

    @staticmethod
    def auth_succeeded(user_id: str, flow: str) -> AuditEvent:
        event_type = (
            AuditEventType.REGISTRATION_SUCCEEDED
            if flow == "register"
            else AuditEventType.SIGN_IN_SUCCEEDED
        )
        return AuditEvent(
            event_type=event_type,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            description=f"{flow.replace('_', ' ').capitalize()} succeeded",
            is_user_action=True,
        )

    @staticmethod
    def auth_failed(flow: str, error_code: str, error_message: str) -> AuditEvent:
        event_type = (
            AuditEventType.REGISTRATION_FAILED
            if flow == "register"
            else AuditEventType.SIGN_IN_FAILED
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description=f"{flow.replace('_', ' ').capitalize()} failed",
            error_code=error_code,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def seed_completed(user_id: str, categories: int, wallets: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SEED_COMPLETED,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            description="Default categories and wallet created",
            details={
                "categories": categories,
                "wallets": wallets,
            },
        )

    @staticmethod
    def seed_failed(user_id: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SEED_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            description="Default data initialization failed",
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(form: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="form",
            description=f"{form.capitalize()} validation failed with {len(issues)} issues",
            details={
                "form": form,
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
