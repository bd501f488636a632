"""Tests for environment configuration"""
import importlib
from decimal import Decimal

import pytest

from storefront import config


@pytest.fixture
def reload_config(monkeypatch):
    """Reload config under patched env, then restore it from the real env"""
    yield monkeypatch
    monkeypatch.undo()
    importlib.reload(config)


def test_defaults():
    assert config.DEFAULT_TAX_RATE == Decimal("0.05")
    assert config.CART_STORAGE_KEY == "rtt-cart"


def test_tax_rate_from_env(reload_config):
    reload_config.setenv("TAX_RATE", "0.13")

    importlib.reload(config)

    assert config.TAX_RATE == Decimal("0.13")


@pytest.mark.parametrize("name", ["TAX_RATE", "DELIVERY_FEE"])
@pytest.mark.parametrize("value", ["five percent", "-0.05", "NaN"])
def test_invalid_amount_fails_at_import(reload_config, name, value):
    reload_config.setenv(name, value)

    with pytest.raises(ValueError):
        importlib.reload(config)
