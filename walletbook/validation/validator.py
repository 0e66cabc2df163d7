"""
Form Validation

DESIGN DECISION: Every form is checked BEFORE anything is sent to the
store. A failed check blocks the action locally and produces an inline
message; it never reaches the storage layer and is never raised.

Forms covered:
- Transaction entry (amount, category, wallet)
- Wallet editor (name, opening balance)
- Registration (password confirmation and strength)

IMPORTANT: Validation NEVER silently fixes input.
It reports issues for the user to correct.
"""

from typing import Optional

from walletbook.config import get_settings
from walletbook.models.validation import ValidationIssue, ValidationResult


def _parse_amount(raw) -> Optional[int]:
    """Whole-number amount from an int or a digit string; None if unparseable."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return None


class TransactionValidator:
    """Checks a transaction form before it is recorded."""

    def __init__(self):
        self._settings = get_settings().app

    def validate(
        self,
        amount,
        category_id: Optional[str],
        wallet_id: Optional[str],
    ) -> ValidationResult:
        """
        Validate the fields the transaction screen submits.

        Amount may be an int or the keypad's digit string.
        """
        issues = []

        value = _parse_amount(amount)
        if value is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount must be a whole number",
            ))
        elif value <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter an amount",
                suggested_fix="Amounts are always positive; pick income or expense for the direction",
            ))
        elif value > self._settings.max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=f"Amount can have at most {self._settings.max_amount_digits} digits",
            ))

        if not category_id:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="missing",
                message="Please select a category",
            ))

        if not wallet_id:
            issues.append(ValidationIssue(
                field="wallet_id",
                issue_type="missing",
                message="Please select a wallet",
            ))

        return ValidationResult(form="transaction", issues=issues)


class WalletValidator:
    """Checks the wallet editor form."""

    def validate(self, name: Optional[str], balance="0") -> ValidationResult:
        issues = []

        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Please enter a wallet name",
            ))

        if balance not in (None, "") and _parse_amount(balance) is None:
            issues.append(ValidationIssue(
                field="balance",
                issue_type="invalid_format",
                message="Balance must be a whole number",
            ))

        return ValidationResult(form="wallet", issues=issues)


class RegistrationValidator:
    """Checks the registration form before calling the auth provider."""

    def __init__(self):
        self._settings = get_settings().app

    def validate(
        self,
        email: Optional[str],
        password: str,
        confirm_password: str,
    ) -> ValidationResult:
        issues = []

        if not email or "@" not in email:
            issues.append(ValidationIssue(
                field="email",
                issue_type="invalid_format",
                message="Invalid email address",
            ))

        if password != confirm_password:
            issues.append(ValidationIssue(
                field="confirm_password",
                issue_type="mismatch",
                message="Passwords do not match",
            ))
        elif len(password) < self._settings.min_password_length:
            issues.append(ValidationIssue(
                field="password",
                issue_type="too_short",
                message=(
                    f"Password must be at least "
                    f"{self._settings.min_password_length} characters"
                ),
            ))

        return ValidationResult(form="register", issues=issues)


def get_user_friendly_summary(result: ValidationResult) -> str:
    """
    Render validation issues as an inline form message.

    An empty string means there is nothing to show.
    """
    if not result.issues:
        return ""

    lines = []
    for issue in result.issues:
        prefix = "⚠️" if issue.severity == "error" else "💡"
        lines.append(f"{prefix} {issue.message}")
        if issue.suggested_fix:
            lines.append(f"   {issue.suggested_fix}")
    return "\n".join(lines)
