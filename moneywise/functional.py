from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from moneywise.domain import EXPENSE, Category, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()

    @staticmethod
    def of(value: Optional[T]) -> 'Maybe[T]':
        return Nothing() if value is None else Some(value)


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """Result of an operation that can fail without raising.

    Right carries the value, Left carries an error dict with at least
    an ``error`` code and a human readable ``message``.
    """

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Right has no error")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_category(cats: Iterable[Category], cat_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def validate_entry(amount: Any, category_id: Optional[str]) -> Either[dict, float]:
    """Check the two required fields of the transaction form.

    ``amount`` may be the raw text from an input box or a number.
    """
    if amount is None or (isinstance(amount, str) and not amount.strip()):
        return Left({"error": "missing_amount", "message": "Enter an amount"})

    try:
        value = float(amount)
    except (TypeError, ValueError):
        return Left({
            "error": "invalid_amount",
            "message": f"Amount {amount!r} is not a number",
        })
    if value < 0 or value != value:
        return Left({
            "error": "invalid_amount",
            "message": "Amount must be a non-negative number",
        })

    if not category_id:
        return Left({"error": "missing_category", "message": "Pick a category"})

    return Right(value)


def check_budget(cat: Category, trans: Iterable[Transaction]) -> Either[dict, Category]:
    """Left when the category's expenses in ``trans`` exceed its budget.

    Callers pass the transactions of the window they care about,
    usually the current calendar month.
    """
    spent = sum(
        t.amount for t in trans
        if t.category_id == cat.id and t.type == EXPENSE
    )

    if cat.budget and spent > cat.budget:
        return Left({
            "error": "budget_exceeded",
            "message": f"Budget exceeded for {cat.name}",
            "category_id": cat.id,
            "limit": cat.budget,
            "spent": spent,
            "over_budget": spent - cat.budget,
        })

    return Right(cat)
