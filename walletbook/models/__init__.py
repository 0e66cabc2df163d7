"""
Data Models Package

This package contains all Pydantic models used in Walletbook.
All data flowing through the system must conform to these schemas.
"""

from walletbook.models.finance import (
    Category,
    CategoryGroup,
    CategoryInput,
    CategoryReport,
    DateGroup,
    Identity,
    MonthlyReport,
    MonthRange,
    Totals,
    Transaction,
    TransactionInput,
    TransactionPatch,
    TransactionType,
    Wallet,
    WalletInput,
    WalletType,
    WalletUpdate,
)
from walletbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from walletbook.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Finance models
    "Category",
    "CategoryGroup",
    "CategoryInput",
    "CategoryReport",
    "DateGroup",
    "Identity",
    "MonthlyReport",
    "MonthRange",
    "Totals",
    "Transaction",
    "TransactionInput",
    "TransactionPatch",
    "TransactionType",
    "Wallet",
    "WalletInput",
    "WalletType",
    "WalletUpdate",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
