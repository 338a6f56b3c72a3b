"""Shared test fixtures."""
from datetime import date

import pytest

import shipping_estimator.calculator as calculator_module
from shipping_estimator.calculator import ShippingCalculator
from shipping_estimator.rates import DEFAULT_RATE_TABLE
from shipping_estimator.rates.loader import RATES_PATH_ENV
from shipping_estimator.schema import CartLine, ShippingAddress


@pytest.fixture(autouse=True)
def builtin_rates(monkeypatch):
    """Keep every test on the built-in rate table."""
    monkeypatch.delenv(RATES_PATH_ENV, raising=False)
    monkeypatch.setattr(calculator_module, "_default_calculator", None)


@pytest.fixture
def calculator():
    return ShippingCalculator(DEFAULT_RATE_TABLE)


@pytest.fixture
def strict_calculator():
    return ShippingCalculator(DEFAULT_RATE_TABLE, strict=True)


@pytest.fixture
def mumbai():
    return ShippingAddress(city="mumbai", state="Maharashtra")


@pytest.fixture
def single_tea_cart():
    """One 100g pack at ₹299."""
    return [CartLine(price=299, quantity=1, weight_grams=100)]


@pytest.fixture
def fixed_today():
    return date(2024, 1, 30)
