"""
Unit tests for core value objects.
"""
import pytest

from core.domain.value_objects import Email, LicenseStatus, LicenseTier


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        """Test valid email creation."""
        email = Email("test@example.com")
        assert str(email) == "test@example.com"
        assert email.value == "test@example.com"

    def test_invalid_email_no_at(self):
        """Test invalid email without @."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("invalid-email")

    def test_invalid_email_empty(self):
        """Test invalid empty email."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("")

    def test_equality_by_value(self):
        """Test value objects compare by value."""
        assert Email("a@example.com") == Email("a@example.com")
        assert hash(Email("a@example.com")) == hash(Email("a@example.com"))


class TestEnums:
    """Tests for status and tier enums."""

    def test_status_values(self):
        """Test status wire values."""
        assert [s.value for s in LicenseStatus] == ["active", "expired", "revoked"]
        assert str(LicenseStatus.REVOKED) == "revoked"

    def test_tier_values(self):
        """Test tier wire values."""
        assert LicenseTier("lifetime") is LicenseTier.LIFETIME
        assert str(LicenseTier.PRO) == "pro"
