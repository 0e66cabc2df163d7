"""
Core Data Models for Walletbook

These models define the schemas for wallets, categories and transactions,
plus the derived report shapes the aggregation engine produces.

DESIGN DECISION: Amounts and balances are plain integers in the smallest
currency unit. There is no fractional money anywhere in the system, so
there is no rounding anywhere in the system either.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a money movement.

    Categories carry the same type so that a category picker can be
    filtered to the kind of transaction being recorded.
    """
    INCOME = "income"
    EXPENSE = "expense"


class WalletType(str, Enum):
    """Kinds of money-holding accounts."""
    CASH = "cash"
    BANK = "bank"
    E_WALLET = "e-wallet"
    CREDIT = "credit"


# =============================================================================
# IDENTITY
# =============================================================================

class Identity(BaseModel):
    """
    Opaque user identity issued by the authentication provider.

    Only `uid` matters to the rest of the system; it namespaces every
    collection the user owns.
    """
    model_config = ConfigDict(frozen=True)

    uid: str = Field(..., min_length=1)
    email: Optional[str] = None
    display_name: Optional[str] = None


# =============================================================================
# WALLETS
# =============================================================================

class WalletInput(BaseModel):
    """Payload for creating a wallet."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    type: WalletType = WalletType.CASH
    icon: str = Field(default="💵")
    balance: int = Field(
        default=0,
        description="Opening balance in the smallest currency unit"
    )
    color: Optional[str] = None


class WalletUpdate(BaseModel):
    """
    Editable wallet fields.

    CRITICAL: `balance` is deliberately absent and extra fields are
    forbidden. A balance only changes through the ledger.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[WalletType] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class Wallet(BaseModel):
    """A stored wallet with its running balance."""

    id: str
    name: str
    type: WalletType = WalletType.CASH
    icon: str = "💵"
    balance: int = 0
    color: Optional[str] = None
    created_at: Optional[datetime] = None


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryInput(BaseModel):
    """Payload for creating a category."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    type: TransactionType
    icon: str
    color: Optional[str] = None


class Category(BaseModel):
    """A stored income or expense category."""

    id: str
    name: str
    icon: str
    type: TransactionType
    color: Optional[str] = None
    created_at: Optional[datetime] = None


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionInput(BaseModel):
    """
    Payload for recording a new transaction.

    The amount is always positive; the type carries the sign.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    type: TransactionType
    amount: int = Field(..., gt=0, description="Amount in the smallest currency unit")
    category_id: str = Field(..., min_length=1)
    wallet_id: str = Field(..., min_length=1)
    date: datetime
    note: Optional[str] = Field(default=None, max_length=500)


class TransactionPatch(BaseModel):
    """
    Partial update for a stored transaction.

    Only fields that were explicitly set are written.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    type: Optional[TransactionType] = None
    amount: Optional[int] = Field(default=None, gt=0)
    category_id: Optional[str] = None
    wallet_id: Optional[str] = None
    date: Optional[datetime] = None
    note: Optional[str] = Field(default=None, max_length=500)

    @property
    def touches_balance(self) -> bool:
        """True when the patch changes a field that moves money."""
        return (
            self.amount is not None
            or self.type is not None
            or self.wallet_id is not None
        )


class Transaction(BaseModel):
    """A stored transaction."""

    id: str
    type: TransactionType
    amount: int = Field(..., gt=0)
    category_id: str
    wallet_id: str
    date: datetime
    note: Optional[str] = None
    created_at: Optional[datetime] = None

    def amended(self, patch: TransactionPatch) -> "Transaction":
        """Return a copy of this transaction with the patch applied."""
        return self.model_copy(update=patch.model_dump(exclude_none=True))


# =============================================================================
# REPORT SHAPES - produced by the aggregation engine
# =============================================================================

class Totals(BaseModel):
    """Income and expense sums over a snapshot."""

    income: int = 0
    expense: int = 0

    @property
    def net(self) -> int:
        return self.income - self.expense


class DateGroup(BaseModel):
    """Transactions that fall on the same local calendar day."""

    date: date
    transactions: list[Transaction] = Field(default_factory=list)


class CategoryGroup(BaseModel):
    """Total of one category's transactions, with display fallbacks applied."""

    category_id: str
    name: str
    icon: str
    color: str
    total: int = Field(default=0, ge=0)


class MonthRange(BaseModel):
    """First and last instant of a calendar month, local time."""

    start: datetime
    end: datetime

    @field_validator("end")
    @classmethod
    def end_after_start(cls, v: datetime, info) -> datetime:
        start = info.data.get("start")
        if start and v < start:
            raise ValueError("Month range end cannot be before start")
        return v


class CategoryReport(BaseModel):
    """One slice of a monthly category breakdown."""

    category_id: str
    category_name: str
    category_icon: str
    color: str
    total: int
    percentage: float = Field(..., ge=0.0, le=100.0)


class MonthlyReport(BaseModel):
    """Everything the reports screen shows for a month."""

    income: int
    expense: int
    balance: int
    categories: list[CategoryReport] = Field(default_factory=list)
