"""Static exchange-rate table and currency conversion helpers."""

import json
import logging
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Annotated, NamedTuple

from pydantic import Field, StringConstraints, TypeAdapter, ValidationError

from tripsplit import config

logger = logging.getLogger("tripsplit")


class Currency(NamedTuple):
    code: str
    symbol: str
    name: str


SUPPORTED_CURRENCIES: tuple[Currency, ...] = (
    Currency("TWD", "NT$", "Taiwan Dollar"),
    Currency("USD", "$", "US Dollar"),
    Currency("JPY", "¥", "Japanese Yen"),
    Currency("EUR", "€", "Euro"),
    Currency("GBP", "£", "British Pound"),
    Currency("KRW", "₩", "Korean Won"),
    Currency("THB", "฿", "Thai Baht"),
    Currency("CNY", "¥", "Chinese Yuan"),
    Currency("HKD", "HK$", "Hong Kong Dollar"),
    Currency("SGD", "S$", "Singapore Dollar"),
    Currency("AUD", "A$", "Australian Dollar"),
    Currency("CAD", "C$", "Canadian Dollar"),
)

# Units of each currency per 1 USD
EXCHANGE_RATES: dict[str, float] = {
    "USD": 1.0,
    "TWD": 31.5,
    "JPY": 148.5,
    "EUR": 0.92,
    "GBP": 0.79,
    "KRW": 1320.0,
    "THB": 35.5,
    "CNY": 7.24,
    "HKD": 7.83,
    "SGD": 1.34,
    "AUD": 1.53,
    "CAD": 1.36,
}

# Display decimal places; anything not listed uses 2
CURRENCY_DECIMALS: dict[str, int] = {
    "JPY": 0,
    "KRW": 0,
}

_Rate = Annotated[float, Field(gt=0, allow_inf_nan=False)]
_rate_file_adapter = TypeAdapter(
    dict[Annotated[str, StringConstraints(pattern=r"^[A-Z]{3}$")], _Rate]
)


class RateTableError(ValueError):
    """Raised when an exchange-rate override file cannot be used."""


def get_currency(code: str) -> Currency | None:
    for currency in SUPPORTED_CURRENCIES:
        if currency.code == code:
            return currency
    return None


@lru_cache(maxsize=8)
def load_rate_overrides(path: str) -> dict[str, float]:
    """Read a ``{code: rate}`` JSON file.

    Raises RateTableError if the file is missing, malformed, or holds
    non-positive or non-finite rates.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise RateTableError(f"Cannot read exchange rates from {path}: {exc}") from exc
    try:
        return _rate_file_adapter.validate_python(raw)
    except ValidationError as exc:
        raise RateTableError(f"Invalid exchange rates in {path}: {exc}") from exc


def active_rates() -> dict[str, float]:
    """Static table merged with EXCHANGE_RATES_FILE, if configured."""
    if not config.EXCHANGE_RATES_FILE:
        return EXCHANGE_RATES
    return {**EXCHANGE_RATES, **load_rate_overrides(config.EXCHANGE_RATES_FILE)}


def _rate_for(code: str, rates: dict[str, float]) -> float:
    rate = rates.get(code)
    if not rate:
        logger.warning(
            "Unknown currency, using rate 1",
            extra={"extra_data": {"currency": code}},
        )
        return 1.0
    return rate


def convert_currency(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: dict[str, float] | None = None,
) -> float:
    """Convert ``amount`` via the USD-relative rate table.

    Unrecognised codes are treated as USD. The result is not rounded.
    """
    if from_currency == to_currency:
        return amount

    if rates is None:
        rates = active_rates()
    amount_in_usd = amount / _rate_for(from_currency, rates)
    return amount_in_usd * _rate_for(to_currency, rates)


def exchange_rate(
    from_currency: str,
    to_currency: str,
    rates: dict[str, float] | None = None,
) -> float:
    """Units of ``to_currency`` per one unit of ``from_currency``."""
    if from_currency == to_currency:
        return 1.0

    if rates is None:
        rates = active_rates()
    return _rate_for(to_currency, rates) / _rate_for(from_currency, rates)


def round_amount(value: float, places: int = 2) -> float:
    """Round half away from zero, so 0.005 -> 0.01 and -0.005 -> -0.01."""
    quantum = Decimal(1).scaleb(-places)
    # + 0.0 folds -0.0 into 0.0
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)) + 0.0


def format_amount(amount: float, currency_code: str) -> str:
    currency = get_currency(currency_code)
    if currency is None:
        return f"{amount:.2f}"

    decimals = CURRENCY_DECIMALS.get(currency_code, 2)
    return f"{currency.symbol} {amount:,.{decimals}f}"
