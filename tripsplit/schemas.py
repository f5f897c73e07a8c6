from datetime import datetime

from pydantic import Field

from tripsplit.models import ExpenseCategory, TripModel


# --- Settlement ---

class Settlement(TripModel):
    from_person: str = Field(alias="from")
    to: str
    amount: float
    # presentation-only markers, never read by the planner
    settled: bool = False
    reminded_at: datetime | None = None


# --- Reports ---

class PersonBalance(TripModel):
    paid: float = 0.0
    owed: float = 0.0
    balance: float = 0.0


class PersonSpending(PersonBalance):
    person_id: str
    name: str


class TripSummary(TripModel):
    currency: str
    total_expenses: float
    expense_count: int
    average_per_person: float
    category_totals: dict[str, float]
    people: list[PersonSpending]


class BudgetProgress(TripModel):
    category: ExpenseCategory | None = None  # None for the whole-trip budget
    budget: float
    spent: float
    percentage: float
    remaining: float
    over_budget: bool
    warning: bool
