"""
Tests for form validators and settings.
"""

import pytest

from walletbook.config import get_settings, validate_all_settings
from walletbook.config.settings import AppSettings, FirestoreSettings
from walletbook.validation import (
    RegistrationValidator,
    TransactionValidator,
    WalletValidator,
    get_user_friendly_summary,
)


class TestTransactionValidator:
    """Tests for the transaction form."""

    def setup_method(self):
        self.validator = TransactionValidator()

    def test_valid_digit_string(self):
        assert self.validator.validate("15000", "food", "w1").is_valid

    def test_valid_int(self):
        assert self.validator.validate(15000, "food", "w1").is_valid

    @pytest.mark.parametrize("amount", ["", "abc", "12.5", None, True])
    def test_not_a_whole_number(self, amount):
        result = self.validator.validate(amount, "food", "w1")
        assert result.first_error == "Amount must be a whole number"

    @pytest.mark.parametrize("amount", ["0", 0, "-5"])
    def test_zero_or_negative(self, amount):
        result = self.validator.validate(amount, "food", "w1")
        assert result.first_error == "Please enter an amount"

    def test_twelve_digits_allowed_thirteen_rejected(self):
        assert self.validator.validate("9" * 12, "food", "w1").is_valid
        result = self.validator.validate("1" + "0" * 12, "food", "w1")
        assert result.first_error == "Amount can have at most 12 digits"

    def test_all_missing(self):
        result = self.validator.validate("", None, None)
        assert result.error_count == 3
        assert result.form == "transaction"


class TestWalletValidator:
    """Tests for the wallet editor."""

    def test_blank_balance_is_fine(self):
        assert WalletValidator().validate("Cash", "").is_valid

    def test_negative_opening_balance_allowed(self):
        assert WalletValidator().validate("Credit card", "-500").is_valid

    def test_missing_name(self):
        assert WalletValidator().validate("", "0").first_error == "Please enter a wallet name"


class TestRegistrationValidator:
    """Tests for the registration form."""

    def test_valid(self):
        assert RegistrationValidator().validate("a@example.com", "secret", "secret").is_valid

    def test_mismatch_reported_before_length(self):
        result = RegistrationValidator().validate("a@example.com", "abc", "abd")
        assert [i.issue_type for i in result.issues] == ["mismatch"]

    def test_short_password(self):
        result = RegistrationValidator().validate("a@example.com", "abcde", "abcde")
        assert result.first_error == "Password must be at least 6 characters"

    def test_invalid_email(self):
        result = RegistrationValidator().validate("not-an-email", "secret", "secret")
        assert result.first_error == "Invalid email address"


class TestSummary:
    """Tests for get_user_friendly_summary()."""

    def test_empty_for_valid(self):
        assert get_user_friendly_summary(WalletValidator().validate("Cash")) == ""

    def test_prefixes_errors(self):
        summary = get_user_friendly_summary(WalletValidator().validate("", "x"))
        assert summary.splitlines() == [
            "⚠️ Please enter a wallet name",
            "⚠️ Balance must be a whole number",
        ]


class TestSettings:
    """Tests for configuration defaults."""

    def test_app_defaults(self):
        settings = AppSettings()
        assert settings.max_amount_digits == 12
        assert settings.max_amount == 999_999_999_999
        assert settings.min_password_length == 6
        assert settings.unknown_category_name == "Unknown"

    def test_only_fields_the_app_reads(self):
        assert set(AppSettings.model_fields) == {
            "max_amount_digits",
            "min_password_length",
            "unknown_category_name",
            "unknown_category_icon",
            "unknown_category_color",
        }
        assert set(FirestoreSettings.model_fields) == {"project_id", "credentials_path"}

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MAX_AMOUNT_DIGITS", "4")
        assert AppSettings().max_amount == 9999

    def test_firestore_unconfigured(self, monkeypatch):
        monkeypatch.delenv("FIRESTORE_PROJECT_ID", raising=False)
        monkeypatch.delenv("FIRESTORE_CREDENTIALS_PATH", raising=False)

        results = validate_all_settings()

        assert results["firestore"] is False
        assert "firestore_error" in results
        assert results["app"] is True

    def test_settings_cached(self):
        assert get_settings() is get_settings()
