from datetime import datetime
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from moneywise.domain import Category, Transaction
from moneywise.insights import (
    FinancialInsights,
    budget_warnings,
    emergency_fund,
    unusual_spending,
    weekly_tip,
)

Derivation = Callable[[Tuple[Transaction, ...], Tuple[Category, ...], datetime], Dict[str, Any]]


def derive_budget_warnings(
    trans: Tuple[Transaction, ...], cats: Tuple[Category, ...], now: datetime
) -> Dict[str, Any]:
    return {"budget_warnings": budget_warnings(trans, cats, now)}


def derive_emergency_fund(
    trans: Tuple[Transaction, ...], cats: Tuple[Category, ...], now: datetime
) -> Dict[str, Any]:
    return {"emergency_fund": emergency_fund(trans)}


def derive_weekly_tip(
    trans: Tuple[Transaction, ...], cats: Tuple[Category, ...], now: datetime
) -> Dict[str, Any]:
    return {"weekly_tip": weekly_tip(now)}


def derive_unusual_spending(
    trans: Tuple[Transaction, ...], cats: Tuple[Category, ...], now: datetime
) -> Dict[str, Any]:
    return {"unusual_spending": unusual_spending(trans, cats, now)}


DEFAULT_DERIVATIONS: Tuple[Derivation, ...] = (
    derive_budget_warnings,
    derive_emergency_fund,
    derive_weekly_tip,
    derive_unusual_spending,
)


class InsightService:
    """Facade running independent insight derivations over one snapshot.

    derivations: sequence of functions taking (transactions, categories, now) -> dict (partial results)
    """

    def __init__(self, derivations: Sequence[Derivation] = DEFAULT_DERIVATIONS):
        self.derivations = derivations

    def report(
        self,
        transactions: Tuple[Transaction, ...],
        categories: Tuple[Category, ...],
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Run every derivation and return the merged result with per-step outputs."""
        now = now or datetime.now()
        report = {"generated_at": now.isoformat(), "steps": [], "result": {}}

        acc: Dict[str, Any] = {}
        for derive in self.derivations:
            out = derive(transactions, categories, now)
            report["steps"].append({"derivation": getattr(derive, "__name__", str(derive)), "output": out})
            acc.update(out)

        report["result"] = acc
        return report

    def financial_insights(
        self,
        transactions: Tuple[Transaction, ...],
        categories: Tuple[Category, ...],
        now: Optional[datetime] = None,
    ) -> FinancialInsights:
        result = self.report(transactions, categories, now)["result"]
        return FinancialInsights(
            budget_warnings=result.get("budget_warnings", ()),
            emergency_fund=result.get("emergency_fund"),
            weekly_tip=result.get("weekly_tip") or weekly_tip(now),
            unusual_spending=result.get("unusual_spending", ()),
        )
