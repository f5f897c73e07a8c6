import json
import math

import pytest

from tripsplit import config
from tripsplit.currency import (
    EXCHANGE_RATES, RateTableError, active_rates, convert_currency, exchange_rate,
    format_amount, get_currency, round_amount,
)


@pytest.mark.parametrize("code", ["USD", "JPY", "EUR", "XYZ"])
def test_same_currency_is_identity(code):
    assert convert_currency(123.456, code, code) == 123.456


def test_convert_jpy_to_usd():
    assert convert_currency(1485, "JPY", "USD") == pytest.approx(10.0)


def test_convert_between_two_non_base_currencies():
    # 100 EUR -> USD -> TWD
    assert convert_currency(100, "EUR", "TWD") == pytest.approx(100 / 0.92 * 31.5)


def test_unknown_currency_falls_back_to_rate_one(caplog):
    assert convert_currency(10, "XXX", "USD") == pytest.approx(10)
    assert convert_currency(10, "USD", "XXX") == pytest.approx(10)
    assert "Unknown currency" in caplog.text


def test_zero_rate_is_treated_as_unknown():
    assert convert_currency(50, "ABC", "USD", rates={"ABC": 0.0, "USD": 1.0}) == 50


def test_exchange_rate():
    assert exchange_rate("USD", "JPY") == pytest.approx(148.5)
    assert exchange_rate("JPY", "USD") == pytest.approx(1 / 148.5)
    assert exchange_rate("EUR", "EUR") == 1.0


def test_round_amount_half_away_from_zero():
    assert round_amount(2.675) == 2.68
    assert round_amount(0.005) == 0.01
    assert round_amount(-0.005) == -0.01
    assert round_amount(21.666666) == 21.67


def test_round_amount_has_no_negative_zero():
    value = round_amount(-0.001)
    assert value == 0.0
    assert math.copysign(1, value) == 1


def test_format_amount():
    assert format_amount(1234.5, "USD") == "$ 1,234.50"
    assert format_amount(1500, "JPY") == "¥ 1,500"
    assert format_amount(12.3, "XYZ") == "12.30"


def test_get_currency():
    assert get_currency("TWD").symbol == "NT$"
    assert get_currency("XYZ") is None


def test_rate_override_file(tmp_path, monkeypatch):
    path = tmp_path / "rates.json"
    path.write_text(json.dumps({"JPY": 100, "CHF": 0.88}))
    monkeypatch.setattr(config, "EXCHANGE_RATES_FILE", str(path))

    rates = active_rates()
    assert rates["JPY"] == 100
    assert rates["CHF"] == 0.88
    assert rates["EUR"] == EXCHANGE_RATES["EUR"]
    assert convert_currency(1000, "JPY", "USD") == pytest.approx(10.0)


@pytest.mark.parametrize("content", ['{"JPY": -1}', '{"JPY": Infinity}', '{"yen": 100}', "not json"])
def test_bad_rate_override_file(tmp_path, monkeypatch, content):
    path = tmp_path / "rates.json"
    path.write_text(content)
    monkeypatch.setattr(config, "EXCHANGE_RATES_FILE", str(path))

    with pytest.raises(RateTableError):
        active_rates()
