"""Unit tests for the entry model and expiry rules."""

import pytest

from ttl_store.core.models import NEVER, NO_EXPIRY, Entry, expiry_from_ttl, is_expired
from ttl_store.errors import DecodeError

NOW = 1_000.0


class TestIsExpired:
    """Test the expiry interpretation rule."""

    def test_zero_never_expires(self):
        assert is_expired(NO_EXPIRY, NOW) is False
        assert is_expired(NO_EXPIRY, 10**12) is False

    def test_past_expiry(self):
        assert is_expired(999, NOW) is True

    def test_expiry_equal_to_now_is_expired(self):
        assert is_expired(1_000, NOW) is True

    def test_future_expiry_is_live(self):
        assert is_expired(1_001, NOW) is False


class TestExpiryFromTtl:
    """Test relative ttl to absolute expiry conversion."""

    def test_integer_ttl(self):
        assert expiry_from_ttl(30, NOW) == 1_030

    def test_fractional_ttl_rounds_up(self):
        assert expiry_from_ttl(2.9, 1_000.7) == 1_004

    def test_fractional_now_rounds_up(self):
        """A one-second ttl set late in a second still lives a full second."""
        exp = expiry_from_ttl(1, 1_000.9)

        assert exp == 1_002
        assert is_expired(exp, 1_001.1) is False

    def test_sub_second_ttl_is_live_on_write(self):
        exp = expiry_from_ttl(0.5, NOW)

        assert exp == 1_001
        assert is_expired(exp, NOW) is False

    def test_zero_ttl_is_expired_on_write(self):
        assert is_expired(expiry_from_ttl(0, 1_000.7), 1_000.7) is True
        assert is_expired(expiry_from_ttl("0", NOW), NOW) is True

    def test_zero_ttl_near_epoch_does_not_mean_never(self):
        assert expiry_from_ttl(0, 0.5) != NO_EXPIRY

    def test_numeric_string_ttl(self):
        assert expiry_from_ttl(" 15 ", NOW) == 1_015

    def test_negative_ttl_is_already_past(self):
        assert is_expired(expiry_from_ttl(-5, NOW), NOW) is True

    @pytest.mark.parametrize("ttl", [NEVER, None, False, True, "later", [1], {"s": 1}, float("nan")])
    def test_everything_else_means_never(self, ttl):
        assert expiry_from_ttl(ttl, NOW) == NO_EXPIRY


class TestEntry:
    """Test Entry helpers."""

    def test_validity_checks(self):
        entry = Entry("key", '"value"', 1_010)

        assert entry.is_valid(NOW) is True
        assert entry.is_expired(1_010) is True
        assert entry.is_valid(1_010) is False

    def test_default_expiry_is_never(self):
        assert Entry("key", "1").exp == NO_EXPIRY

    def test_load_decodes_value(self):
        assert Entry("key", '{"a": [1, 2]}').load() == {"a": [1, 2]}

    def test_load_corrupt_value(self):
        with pytest.raises(DecodeError):
            Entry("key", "not-json").load()

    def test_entry_is_immutable(self):
        entry = Entry("key", "1")
        with pytest.raises(AttributeError):
            entry.exp = 5
