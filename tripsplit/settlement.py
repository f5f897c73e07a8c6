"""Debt simplification: turn a balance ledger into a short list of transfers."""

import logging

from tripsplit.balances import compute_balances
from tripsplit.currency import round_amount
from tripsplit.models import Trip
from tripsplit.schemas import Settlement

logger = logging.getLogger("tripsplit")

# Balances within this distance of zero count as settled
TOLERANCE = 0.01


def simplify_balances(balances: dict[str, float]) -> list[Settlement]:
    """Greedy largest-debtor / largest-creditor matching.

    Debtors are taken most negative first and creditors most positive first;
    equal balances are ordered by person id so the plan is reproducible.
    """
    debtors = [
        {"id": pid, "balance": bal} for pid, bal in balances.items() if bal < -TOLERANCE
    ]
    creditors = [
        {"id": pid, "balance": bal} for pid, bal in balances.items() if bal > TOLERANCE
    ]

    debtors.sort(key=lambda x: (x["balance"], x["id"]))
    creditors.sort(key=lambda x: (-x["balance"], x["id"]))

    settlements: list[Settlement] = []
    di = 0
    ci = 0

    while di < len(debtors) and ci < len(creditors):
        debtor = debtors[di]
        creditor = creditors[ci]

        transfer = min(abs(debtor["balance"]), creditor["balance"])
        if transfer > TOLERANCE:
            settlements.append(Settlement(
                from_person=debtor["id"],
                to=creditor["id"],
                amount=round_amount(transfer),
            ))

        debtor["balance"] += transfer
        creditor["balance"] -= transfer

        if abs(debtor["balance"]) < TOLERANCE:
            di += 1
        if abs(creditor["balance"]) < TOLERANCE:
            ci += 1

    return settlements


def compute_settlements(
    trip: Trip,
    rates: dict[str, float] | None = None,
) -> list[Settlement]:
    settlements = simplify_balances(compute_balances(trip, rates))
    logger.debug(
        "Settlement plan computed",
        extra={"extra_data": {"trip_id": trip.id, "transfers": len(settlements)}},
    )
    return settlements


def apply_settlements(
    balances: dict[str, float],
    settlements: list[Settlement],
) -> dict[str, float]:
    """Balances after every transfer is paid; all should end near zero."""
    result = dict(balances)
    for s in settlements:
        result[s.from_person] = result.get(s.from_person, 0.0) + s.amount
        result[s.to] = result.get(s.to, 0.0) - s.amount
    return result
