"""Tests for environment configuration."""

import pytest
from dateutil import tz

from bizdash.config import Settings, load_settings
from bizdash.domain.errors import ValidationError
from bizdash.domain.money import DEFAULT_FORMAT


def test_defaults():
    settings = load_settings({})
    assert settings.owner_id is None
    assert settings.database_path is None
    assert settings.timezone == "UTC"
    assert settings.zone is tz.UTC
    assert settings.low_stock_threshold == 5
    assert settings.currency == DEFAULT_FORMAT


def test_environment_values():
    settings = load_settings(
        {
            "BIZDASH_OWNER": "owner-a",
            "BIZDASH_DB_PATH": "/tmp/shop.db",
            "BIZDASH_TIMEZONE": "Europe/Lisbon",
            "BIZDASH_LOW_STOCK_THRESHOLD": "3",
            "BIZDASH_CURRENCY_SYMBOL": "R$",
            "BIZDASH_SYMBOL_FIRST": "true",
        }
    )
    assert settings.owner_id == "owner-a"
    assert settings.database_path == "/tmp/shop.db"
    assert settings.zone == tz.gettz("Europe/Lisbon")
    assert settings.low_stock_threshold == 3
    assert settings.currency.symbol == "R$"
    assert settings.currency.symbol_first


def test_overrides_win_unless_none():
    settings = load_settings(
        {"BIZDASH_OWNER": "owner-a", "BIZDASH_TIMEZONE": "Europe/Lisbon"},
        owner_id="owner-b",
        timezone=None,
    )
    assert settings.owner_id == "owner-b"
    assert settings.timezone == "Europe/Lisbon"


def test_dollar_format():
    settings = load_settings(
        {
            "BIZDASH_CURRENCY_SYMBOL": "$",
            "BIZDASH_DECIMAL_SEPARATOR": ".",
            "BIZDASH_GROUP_SEPARATOR": ",",
        }
    )
    assert settings.currency.decimal_separator == "."


def test_same_separators_rejected():
    with pytest.raises(ValidationError, match="separators"):
        load_settings({"BIZDASH_DECIMAL_SEPARATOR": "."})


def test_bad_threshold():
    with pytest.raises(ValidationError, match="BIZDASH_LOW_STOCK_THRESHOLD"):
        load_settings({"BIZDASH_LOW_STOCK_THRESHOLD": "few"})


def test_unknown_timezone():
    settings = Settings(timezone="Mars/Olympus")
    with pytest.raises(ValidationError, match="Unknown timezone"):
        settings.zone
