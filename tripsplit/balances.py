"""Trip-wide balance computation in the trip's base currency."""

import logging

from tripsplit.currency import active_rates, convert_currency, round_amount
from tripsplit.models import Trip
from tripsplit.splits import resolve_shares

logger = logging.getLogger("tripsplit")


def compute_balances(
    trip: Trip,
    rates: dict[str, float] | None = None,
) -> dict[str, float]:
    """Compute {person_id: balance}, positive meaning the person is owed money.

    Every person in the trip appears, even with no expenses. A payer or share
    holder missing from ``trip.people`` gets an entry of its own so the ledger
    still sums to zero.
    """
    if rates is None:
        rates = active_rates()

    balances: dict[str, float] = {p.id: 0.0 for p in trip.people}

    def ensure(person_id: str, expense_id: str) -> None:
        if person_id not in balances:
            logger.warning(
                "Expense references unknown person",
                extra={"extra_data": {
                    "trip_id": trip.id, "expense_id": expense_id, "person_id": person_id,
                }},
            )
            balances[person_id] = 0.0

    for expense in trip.expenses:
        ensure(expense.paid_by, expense.id)
        balances[expense.paid_by] += convert_currency(
            expense.amount, expense.currency, trip.currency, rates,
        )

        for person_id, share in resolve_shares(expense).items():
            ensure(person_id, expense.id)
            balances[person_id] -= convert_currency(
                share, expense.currency, trip.currency, rates,
            )

    return {person_id: round_amount(balance) for person_id, balance in balances.items()}
