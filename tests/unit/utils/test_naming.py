"""Unit tests for table-name sanitization."""

import pytest

from ttl_store.errors import InvalidTableNameError
from ttl_store.utils.naming import sanitize_table_name


class TestSanitizeTableName:
    def test_leading_digit_and_separators(self):
        assert sanitize_table_name("3-my.store") == "_3_my_store"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("store", "store"),
            ("my store", "my_store"),
            ("a.b-c d", "a_b_c_d"),
            ("9lives", "_9lives"),
            ("_private", "_private"),
        ],
    )
    def test_substitutions(self, name, expected):
        assert sanitize_table_name(name) == expected

    @pytest.mark.parametrize("name", ["", "semi;colon", "quote'd", "café", "tab\tname"])
    def test_unsafe_names_rejected(self, name):
        with pytest.raises(InvalidTableNameError) as exc_info:
            sanitize_table_name(name)
        assert exc_info.value.code == "INVALID_TABLE_NAME"
