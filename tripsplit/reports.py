"""Derived per-person and per-trip views, all in the trip currency."""

from tripsplit.currency import active_rates, convert_currency, round_amount
from tripsplit.models import CATEGORIES, Trip
from tripsplit.schemas import BudgetProgress, PersonBalance, PersonSpending, TripSummary
from tripsplit.splits import resolve_shares

BUDGET_WARNING_PERCENT = 80


def _paid_and_owed(trip: Trip, person_id: str, rates: dict[str, float]) -> tuple[float, float]:
    paid = 0.0
    owed = 0.0
    for expense in trip.expenses:
        if expense.paid_by == person_id:
            paid += convert_currency(expense.amount, expense.currency, trip.currency, rates)

        share = resolve_shares(expense).get(person_id)
        if share is not None:
            owed += convert_currency(share, expense.currency, trip.currency, rates)
    return paid, owed


def person_balance(
    trip: Trip,
    person_id: str,
    rates: dict[str, float] | None = None,
) -> PersonBalance:
    """What one person paid, what they owe, and the difference.

    Agrees with compute_balances() for the same person to within a cent.
    """
    if rates is None:
        rates = active_rates()
    paid, owed = _paid_and_owed(trip, person_id, rates)
    return PersonBalance(
        paid=round_amount(paid),
        owed=round_amount(owed),
        balance=round_amount(paid - owed),
    )


def _spent_by_category(trip: Trip, rates: dict[str, float]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for expense in trip.expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + convert_currency(
            expense.amount, expense.currency, trip.currency, rates,
        )
    return totals


def trip_summary(trip: Trip, rates: dict[str, float] | None = None) -> TripSummary:
    if rates is None:
        rates = active_rates()

    by_category = _spent_by_category(trip, rates)
    total = sum(by_category.values())

    people = []
    for person in trip.people:
        pb = person_balance(trip, person.id, rates)
        people.append(PersonSpending(
            person_id=person.id,
            name=person.name,
            paid=pb.paid,
            owed=pb.owed,
            balance=pb.balance,
        ))

    return TripSummary(
        currency=trip.currency,
        total_expenses=round_amount(total),
        expense_count=len(trip.expenses),
        average_per_person=round_amount(total / len(trip.people)) if trip.people else 0.0,
        # keep the fixed category order rather than first-seen order
        category_totals={
            c: round_amount(by_category[c]) for c in CATEGORIES if c in by_category
        },
        people=people,
    )


def _progress(category: str | None, budget: float, spent: float) -> BudgetProgress:
    percentage = min(spent / budget * 100, 100.0) if budget > 0 else 0.0
    over_budget = spent > budget
    return BudgetProgress(
        category=category,
        budget=budget,
        spent=round_amount(spent),
        percentage=round_amount(percentage),
        remaining=round_amount(max(budget - spent, 0.0)),
        over_budget=over_budget,
        warning=percentage >= BUDGET_WARNING_PERCENT and not over_budget,
    )


def budget_progress(trip: Trip, rates: dict[str, float] | None = None) -> list[BudgetProgress]:
    """Progress rows for the total budget, then each budgeted category.

    Budgets that are unset or zero produce no row.
    """
    if trip.budget is None:
        return []
    if rates is None:
        rates = active_rates()

    by_category = _spent_by_category(trip, rates)
    rows = []
    if trip.budget.total:
        rows.append(_progress(None, trip.budget.total, sum(by_category.values())))
    for category in CATEGORIES:
        amount = trip.budget.categories.get(category)
        if amount:
            rows.append(_progress(category, amount, by_category.get(category, 0.0)))
    return rows
