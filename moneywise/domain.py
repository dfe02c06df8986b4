from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

INCOME = "income"
EXPENSE = "expense"

RECURRING_FREQUENCIES = ("daily", "weekly", "monthly", "yearly")

QUICK_AMOUNTS = (50, 100, 200, 500, 1000, 2000, 5000)


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str                      # hex display hint, e.g. "#ef4444"
    icon: str                       # symbolic name, see moneywise.icons
    type: str                       # "income" or "expense"
    budget: Optional[float] = None  # monthly ceiling, expense categories only

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "icon": self.icon,
            "type": self.type,
        }
        if self.budget is not None:
            d["budget"] = self.budget
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Category":
        return cls(
            id=d["id"],
            name=d["name"],
            color=d.get("color", "#64748b"),
            icon=d.get("icon", "Circle"),
            type=d["type"],
            budget=d.get("budget"),
        )


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float        # always non-negative, direction comes from type
    type: str            # "income" or "expense"
    category_id: str     # not enforced, may dangle
    note: str
    date: str            # ISO date, e.g. "2024-01-05"
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[str] = None
    next_due_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "amount": self.amount,
            "type": self.type,
            "categoryId": self.category_id,
            "note": self.note,
            "date": self.date,
        }
        # unset optionals are omitted
        if self.is_recurring is not None:
            d["isRecurring"] = self.is_recurring
        if self.recurring_frequency is not None:
            d["recurringFrequency"] = self.recurring_frequency
        if self.next_due_date is not None:
            d["nextDueDate"] = self.next_due_date
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Transaction":
        return cls(
            id=d["id"],
            amount=d["amount"],
            type=d["type"],
            category_id=d["categoryId"],
            note=d.get("note") or "",
            date=d["date"],
            is_recurring=d.get("isRecurring"),
            recurring_frequency=d.get("recurringFrequency"),
            next_due_date=d.get("nextDueDate"),
        )


# wire names for the fields a caller may pass to update_transaction
TRANSACTION_FIELDS = {
    "amount": "amount",
    "type": "type",
    "categoryId": "category_id",
    "note": "note",
    "date": "date",
    "isRecurring": "is_recurring",
    "recurringFrequency": "recurring_frequency",
    "nextDueDate": "next_due_date",
}


@dataclass(frozen=True)
class FinanceData:
    transactions: Tuple[Transaction, ...]
    categories: Tuple[Category, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "categories": [c.to_dict() for c in self.categories],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FinanceData":
        return cls(
            transactions=tuple(Transaction.from_dict(t) for t in d["transactions"]),
            categories=tuple(Category.from_dict(c) for c in d["categories"]),
        )


DEFAULT_CATEGORIES: Tuple[Category, ...] = (
    Category("1", "Salary", "#10b981", "Wallet", INCOME),
    Category("2", "Freelance", "#06b6d4", "Laptop", INCOME),
    Category("3", "Investment", "#8b5cf6", "TrendingUp", INCOME),
    Category("4", "Gift", "#f59e0b", "Gift", INCOME),
    Category("5", "Food & Dining", "#ef4444", "UtensilsCrossed", EXPENSE, budget=8000),
    Category("6", "Transport", "#3b82f6", "Car", EXPENSE),
    Category("7", "Shopping", "#ec4899", "ShoppingBag", EXPENSE),
    Category("8", "Bills", "#f97316", "Receipt", EXPENSE),
    Category("9", "Entertainment", "#a855f7", "Gamepad2", EXPENSE, budget=3000),
    Category("10", "Health", "#14b8a6", "Heart", EXPENSE),
    Category("11", "Education", "#6366f1", "GraduationCap", EXPENSE),
    Category("12", "Other", "#64748b", "MoreHorizontal", EXPENSE),
)


def default_finance_data() -> FinanceData:
    return FinanceData(transactions=(), categories=DEFAULT_CATEGORIES)
