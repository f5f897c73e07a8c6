import uuid
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, FiniteFloat, Tag
from pydantic.alias_generators import to_camel


def new_uuid():
    return str(uuid.uuid4())


ExpenseCategory = Literal[
    "food", "clothing", "accommodation", "transport", "education", "entertainment", "other",
]
CATEGORIES: tuple[str, ...] = ExpenseCategory.__args__

SHARED_METHODS = ("equal", "exact", "percentage")


class TripModel(BaseModel):
    """Base for stored records: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BankInfo(TripModel):
    bank_name: str
    account_number: str


class Person(TripModel):
    id: str = Field(default_factory=new_uuid)
    name: str
    color: str = "#6b7280"
    bank_info: BankInfo | None = None


class Split(TripModel):
    person_id: str
    amount: FiniteFloat  # expense currency; authoritative even when percentage is set
    percentage: float | None = None


class ExpenseItem(TripModel):
    id: str = Field(default_factory=new_uuid)
    name: str
    amount: FiniteFloat
    split_among: list[str] = []


class _ExpenseBase(TripModel):
    id: str = Field(default_factory=new_uuid)
    description: str = ""
    amount: float = Field(ge=0, allow_inf_nan=False)
    currency: str = "USD"
    date: str = ""
    category: ExpenseCategory = "other"
    paid_by: str
    splits: list[Split] = []
    notes: str | None = None
    created_at: str = ""


class SharedExpense(_ExpenseBase):
    """Expense split by equal shares, exact amounts or percentages."""

    split_method: Literal["equal", "exact", "percentage"] = "equal"


class ItemizedExpense(_ExpenseBase):
    """Expense split line by line; ``splits`` is kept only for the stored record."""

    split_method: Literal["items"] = "items"
    items: list[ExpenseItem] = []


def _expense_tag(value) -> str:
    if isinstance(value, dict):
        method = value.get("splitMethod", value.get("split_method", "equal"))
    else:
        method = getattr(value, "split_method", "equal")
    return "items" if method == "items" else "shared"


Expense = Annotated[
    Union[
        Annotated[SharedExpense, Tag("shared")],
        Annotated[ItemizedExpense, Tag("items")],
    ],
    Discriminator(_expense_tag),
]


class TripBudget(TripModel):
    total: float | None = None
    categories: dict[ExpenseCategory, float] = {}


class Trip(TripModel):
    id: str = Field(default_factory=new_uuid)
    name: str = ""
    description: str = ""
    currency: str = "USD"
    start_date: str = ""
    end_date: str = ""
    created_at: str = ""
    people: list[Person] = []
    expenses: list[Expense] = []
    budget: TripBudget | None = None

    def person(self, person_id: str) -> Person | None:
        for p in self.people:
            if p.id == person_id:
                return p
        return None
