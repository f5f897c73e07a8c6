import pytest

from conftest import itemized, shared
from tripsplit.models import ExpenseItem
from tripsplit.splits import (
    SplitValidationError, equal_splits, percentage_splits, remaining_item, resolve_shares,
    validate_expense,
)


def test_listed_shares_are_read_directly():
    expense = shared("a", 100, {"a": 70, "b": 30})
    assert resolve_shares(expense) == {"a": 70, "b": 30}


def test_percentage_amount_is_authoritative():
    expense = shared("a", 100, {"a": 40, "b": 60}, method="percentage")
    expense.splits[0].percentage = 99  # stale UI value, ignored
    assert resolve_shares(expense) == {"a": 40, "b": 60}


def test_duplicate_split_entries_are_summed():
    expense = shared("a", 30, {"a": 10})
    expense.splits.append(expense.splits[0].model_copy())
    assert resolve_shares(expense) == {"a": 20}


def test_empty_splits_resolve_to_nothing():
    assert resolve_shares(shared("a", 50, {})) == {}


def test_itemized_shares():
    expense = itemized("c", 50, [
        ("Pasta", 30, ["a", "b"]),
        ("Wine", 20, ["a", "b", "c"]),
    ])
    shares = resolve_shares(expense)

    assert shares["a"] == pytest.approx(21.67, abs=0.005)
    assert shares["b"] == pytest.approx(21.67, abs=0.005)
    assert shares["c"] == pytest.approx(6.67, abs=0.005)
    assert sum(shares.values()) == pytest.approx(50)


def test_item_without_members_contributes_nothing():
    expense = itemized("a", 40, [("Ghost", 25, []), ("Coffee", 15, ["b"])])
    assert resolve_shares(expense) == {"b": 15}


def test_partial_item_coverage_is_allowed():
    expense = itemized("a", 100, [("Soup", 10, ["a", "b"])])
    assert sum(resolve_shares(expense).values()) == pytest.approx(10)


def test_equal_splits_round_each_share():
    splits = equal_splits(100, ["a", "b", "c"])
    assert [s.amount for s in splits] == [33.33, 33.33, 33.33]
    assert equal_splits(100, []) == []


def test_percentage_splits():
    splits = percentage_splits(80, {"a": 25, "b": 75})
    assert [(s.person_id, s.amount, s.percentage) for s in splits] == [
        ("a", 20, 25), ("b", 60, 75),
    ]


def test_remaining_item():
    items = [ExpenseItem(name="Pizza", amount=30, split_among=["a"])]
    item = remaining_item(50, items, ["a", "b"])
    assert item.amount == pytest.approx(20)
    assert item.split_among == ["a", "b"]

    assert remaining_item(30, items, ["a"]) is None
    assert remaining_item(50, items, []) is None


def test_validate_expense_accepts_cent_tolerance():
    validate_expense(shared("a", 100, {"a": 33.33, "b": 33.33, "c": 33.33}, method="equal"))


def test_validate_expense_rejects_mismatched_total():
    with pytest.raises(SplitValidationError, match="Split total"):
        validate_expense(shared("a", 100, {"a": 40, "b": 50}))


def test_validate_expense_rejects_empty_inputs():
    with pytest.raises(SplitValidationError):
        validate_expense(shared("a", 0, {"a": 0}))
    with pytest.raises(SplitValidationError):
        validate_expense(shared("a", 10, {}))
    with pytest.raises(SplitValidationError):
        validate_expense(itemized("a", 10, []))
    with pytest.raises(SplitValidationError, match="not shared"):
        validate_expense(itemized("a", 10, [("Tea", 10, [])]))
