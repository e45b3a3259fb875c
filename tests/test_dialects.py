"""Tests for the dialect registry."""

import pytest
from erd_engine.dialects import (
    DIALECT_FEATURES,
    UnknownDialectError,
    get_dialect,
    get_supported_types,
    validate_identifier,
)
from erd_engine.models import ColumnType


class TestDialectRegistry:
    """Tests for dialect lookup and feature flags."""

    def test_registry_keys(self):
        assert set(DIALECT_FEATURES) == {"mysql", "postgresql", "sqlserver", "sqlite", "oracle"}

    def test_lookup_is_case_insensitive(self):
        assert get_dialect("PostgreSQL").key == "postgresql"

    def test_unknown_dialect_raises(self):
        with pytest.raises(UnknownDialectError, match="db2"):
            get_dialect("db2")

    def test_unknown_dialect_is_a_value_error(self):
        with pytest.raises(ValueError):
            get_dialect("")

    def test_supported_types(self):
        assert ColumnType.ARRAY in get_supported_types("postgresql")
        assert ColumnType.ARRAY not in get_supported_types("mysql")
        assert ColumnType.JSON not in get_supported_types("sqlserver")
        assert ColumnType.ENUM in get_supported_types("mysql")
        assert ColumnType.UUID not in get_supported_types("sqlite")


class TestValidateIdentifier:
    """Tests for identifier validation."""

    def test_plain_name_is_valid(self):
        assert validate_identifier("users", "mysql") is True

    @pytest.mark.parametrize("dialect", list(DIALECT_FEATURES))
    def test_reserved_word_is_invalid(self, dialect):
        assert validate_identifier("select", dialect) is False

    def test_dialect_specific_reserved_word(self):
        assert validate_identifier("user", "postgresql") is False
        assert validate_identifier("user", "mysql") is True

    def test_length_limit(self):
        assert validate_identifier("a" * 64, "mysql") is True
        assert validate_identifier("a" * 65, "mysql") is False
        assert validate_identifier("a" * 64, "postgresql") is False

    def test_empty_name_is_invalid(self):
        assert validate_identifier("", "mysql") is False

    def test_unknown_dialect_accepts_everything(self):
        assert validate_identifier("select", "db2") is True
