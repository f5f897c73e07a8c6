"""Per-expense share resolution, plus the split builders used by entry forms."""

from collections.abc import Callable, Iterable

from tripsplit.currency import round_amount
from tripsplit.models import (
    SHARED_METHODS, Expense, ExpenseItem, ItemizedExpense, SharedExpense, Split,
)

SPLIT_TOLERANCE = 0.01


class SplitValidationError(ValueError):
    """Raised by validate_expense; the balance engine itself never raises it."""


def _resolve_listed(expense: SharedExpense) -> dict[str, float]:
    # equal/exact/percentage all store the final amount on each split
    shares: dict[str, float] = {}
    for split in expense.splits:
        shares[split.person_id] = shares.get(split.person_id, 0.0) + split.amount
    return shares


def _resolve_items(expense: ItemizedExpense) -> dict[str, float]:
    shares: dict[str, float] = {}
    for item in expense.items:
        count = len(item.split_among)
        if count == 0:
            continue
        per_person = item.amount / count
        for person_id in item.split_among:
            shares[person_id] = shares.get(person_id, 0.0) + per_person
    return shares


_RESOLVERS: dict[str, Callable[[Expense], dict[str, float]]] = {
    "equal": _resolve_listed,
    "exact": _resolve_listed,
    "percentage": _resolve_listed,
    "items": _resolve_items,
}


def resolve_shares(expense: Expense) -> dict[str, float]:
    """Return {person_id: owed amount} in the expense's own currency.

    Item amounts are divided with plain float division; sub-cent remainders
    are left unassigned.
    """
    return _RESOLVERS[expense.split_method](expense)


# --- Form helpers ---

def equal_splits(amount: float, person_ids: Iterable[str]) -> list[Split]:
    """Even split with each share rounded to cents, as the entry form stores it."""
    ids = list(person_ids)
    if not ids:
        return []
    share = round_amount(amount / len(ids))
    return [Split(person_id=pid, amount=share) for pid in ids]


def percentage_splits(amount: float, percentages: dict[str, float]) -> list[Split]:
    return [
        Split(person_id=pid, amount=amount * pct / 100, percentage=pct)
        for pid, pct in percentages.items()
    ]


def remaining_item(
    amount: float,
    items: Iterable[ExpenseItem],
    person_ids: Iterable[str],
    name: str = "Split remaining",
) -> ExpenseItem | None:
    """Line item covering whatever the existing items leave of ``amount``."""
    ids = list(person_ids)
    remaining = amount - sum(item.amount for item in items)
    if remaining <= 0 or not ids:
        return None
    return ExpenseItem(name=name, amount=remaining, split_among=ids)


def validate_expense(expense: Expense) -> None:
    if expense.amount <= 0:
        raise SplitValidationError("Please enter a valid amount")

    if expense.split_method in SHARED_METHODS:
        if not expense.splits:
            raise SplitValidationError("At least one person must share the expense")
        split_total = sum(s.amount for s in expense.splits)
        # compare in cents so 3 x 33.33 against 100 stays inside the tolerance
        if round_amount(abs(split_total - expense.amount)) > SPLIT_TOLERANCE:
            raise SplitValidationError(
                f"Split total ({split_total:.2f}) must equal expense amount ({expense.amount:.2f})"
            )
        return

    if not expense.items:
        raise SplitValidationError("At least one item is required")
    for item in expense.items:
        if not item.split_among:
            raise SplitValidationError(f"Item '{item.name}' is not shared by anyone")
