import logging

import pytest

from tripsplit import config
from tripsplit.currency import load_rate_overrides
from tripsplit.models import ExpenseItem, ItemizedExpense, Person, SharedExpense, Split, Trip


@pytest.fixture(autouse=True)
def static_rates(monkeypatch):
    monkeypatch.setattr(config, "EXCHANGE_RATES_FILE", None)
    load_rate_overrides.cache_clear()
    yield
    load_rate_overrides.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("tripsplit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def shared(paid_by, amount, shares, method="exact", currency="USD", **kwargs):
    return SharedExpense(
        paid_by=paid_by,
        amount=amount,
        currency=currency,
        split_method=method,
        splits=[Split(person_id=pid, amount=amt) for pid, amt in shares.items()],
        **kwargs,
    )


def itemized(paid_by, amount, items, currency="USD", **kwargs):
    return ItemizedExpense(
        paid_by=paid_by,
        amount=amount,
        currency=currency,
        items=[ExpenseItem(name=name, amount=amt, split_among=members) for name, amt, members in items],
        **kwargs,
    )


@pytest.fixture
def people():
    return [
        Person(id="a", name="Alice"),
        Person(id="b", name="Bob"),
        Person(id="c", name="Carol"),
    ]


@pytest.fixture
def four_way_trip():
    """a: +60, b: -45, c: +30, d: -45."""
    return Trip(
        id="trip-1",
        name="Lisbon",
        currency="USD",
        people=[
            Person(id="a", name="Alice"),
            Person(id="b", name="Bob"),
            Person(id="c", name="Carol"),
            Person(id="d", name="Dan"),
        ],
        expenses=[
            shared("a", 120, {"a": 30, "b": 30, "c": 30, "d": 30}, method="equal", category="food"),
            shared("b", 45, {"a": 10, "c": 20, "d": 15}, category="transport"),
            shared("c", 80, {"a": 20, "b": 60}, method="percentage", category="accommodation"),
        ],
    )
