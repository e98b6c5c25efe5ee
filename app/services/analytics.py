"""
Descriptive analytics over a single user's transactions, budgets and goals.

Every function here is pure: records come in already fetched from storage
(plain dicts or pydantic models), value objects go out. Degenerate input such
as a zero budget limit or an empty history yields zero/empty results rather
than an error.
"""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from app.utils.dates import parse_datetime
from app.utils.money import format_currency

BUDGET_ALERT_THRESHOLD = 80.0
TREND_THRESHOLD = 10.0
DOMINANT_CATEGORY_THRESHOLD = 30.0


@dataclass
class MonthlyStats:
    month: str
    income: int
    expenses: int
    balance: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CategorySpending:
    category: str
    amount: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SpendingComparison:
    expense_change: float
    income_change: float
    trend: str  # "up" | "down" | "stable"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BudgetAlert:
    category: str
    spent: int
    limit: int
    percentage: float
    is_alert: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FinancialInsight:
    title: str
    description: str
    type: str  # "info" | "warning" | "success"
    actionable: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record[name]
    return getattr(record, name)


def _value(raw: Any) -> Any:
    return raw.value if isinstance(raw, Enum) else raw


def _iso(raw: Any) -> str:
    return parse_datetime(raw).isoformat()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _percent_change(current: int, previous: int) -> float:
    # Zero baseline reports no change rather than an infinite one.
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def _sum_by_type(transactions: Iterable[Any], type_: str, month: str) -> int:
    return sum(
        _field(t, "amount")
        for t in transactions
        if _value(_field(t, "type")) == type_
        and _iso(_field(t, "transaction_date")).startswith(month)
    )


def calculate_monthly_stats(transactions: Sequence[Any], month: str) -> MonthlyStats:
    """Income, expenses and balance for the ``YYYY-MM`` month."""
    income = _sum_by_type(transactions, "income", month)
    expenses = _sum_by_type(transactions, "expense", month)
    return MonthlyStats(month=month, income=income, expenses=expenses, balance=income - expenses)


def calculate_category_spending(
    transactions: Sequence[Any],
    start_date: datetime,
    end_date: datetime,
) -> List[CategorySpending]:
    """
    Expense totals per category between ``start_date`` and ``end_date``
    (both inclusive), largest first, with each category's share of the total.
    """
    start = parse_datetime(start_date)
    end = parse_datetime(end_date)

    totals: Dict[str, int] = defaultdict(int)
    total_expenses = 0
    for t in transactions:
        if _value(_field(t, "type")) != "expense":
            continue
        when = parse_datetime(_field(t, "transaction_date"))
        if not start <= when <= end:
            continue
        amount = _field(t, "amount")
        totals[_value(_field(t, "category"))] += amount
        total_expenses += amount

    spending = [
        CategorySpending(
            category=category,
            amount=amount,
            percentage=amount / total_expenses * 100 if total_expenses > 0 else 0.0,
        )
        for category, amount in totals.items()
    ]
    return sorted(spending, key=lambda item: item.amount, reverse=True)


def compare_monthly_spending(current: MonthlyStats, previous: MonthlyStats) -> SpendingComparison:
    expense_change = _percent_change(current.expenses, previous.expenses)
    income_change = _percent_change(current.income, previous.income)

    trend = "stable"
    if expense_change > TREND_THRESHOLD:
        trend = "up"
    elif expense_change < -TREND_THRESHOLD:
        trend = "down"

    return SpendingComparison(expense_change=expense_change, income_change=income_change, trend=trend)


def estimate_monthly_expenses(
    monthly_stats: Sequence[MonthlyStats],
    days_elapsed: int,
    total_days: int = 30,
) -> float:
    """
    Linear projection of the average of the last three months' expenses.

    With no elapsed days the plain average is returned.
    """
    if not monthly_stats:
        return 0

    recent = monthly_stats[-3:]
    average = sum(stats.expenses for stats in recent) / len(recent)

    if days_elapsed > 0:
        return _round_half_up(average / days_elapsed * total_days)
    return average


def generate_budget_alerts(budgets: Sequence[Any]) -> List[BudgetAlert]:
    alerts = []
    for budget in budgets:
        limit = _field(budget, "limit")
        spent = _field(budget, "spent")
        percentage = spent / limit * 100 if limit > 0 else 0.0
        alerts.append(
            BudgetAlert(
                category=_value(_field(budget, "category")),
                spent=spent,
                limit=limit,
                percentage=percentage,
                is_alert=percentage >= BUDGET_ALERT_THRESHOLD,
            )
        )
    return sorted(alerts, key=lambda alert: alert.percentage, reverse=True)


def generate_financial_insights(
    current_stats: MonthlyStats,
    previous_stats: Optional[MonthlyStats],
    category_spending: Sequence[CategorySpending],
    budget_alerts: Sequence[BudgetAlert],
    savings_goals: Sequence[Any],
) -> List[FinancialInsight]:
    """Human-readable observations, in display order."""
    insights: List[FinancialInsight] = []

    if previous_stats is not None:
        comparison = compare_monthly_spending(current_stats, previous_stats)
        if comparison.trend == "up":
            insights.append(FinancialInsight(
                title="Spending Up",
                description=(
                    f"Your spending increased {_round_half_up(comparison.expense_change)}% "
                    "compared to last month."
                ),
                type="warning",
                actionable=True,
            ))
        elif comparison.trend == "down":
            insights.append(FinancialInsight(
                title="Spending Down",
                description=(
                    f"Well done! Your spending decreased {_round_half_up(abs(comparison.expense_change))}% "
                    "compared to last month."
                ),
                type="success",
                actionable=False,
            ))

    if category_spending:
        top = category_spending[0]
        if top.percentage > DOMINANT_CATEGORY_THRESHOLD:
            insights.append(FinancialInsight(
                title="Dominant Category",
                description=f"{top.category} accounts for {_round_half_up(top.percentage)}% of your spending this month.",
                type="info",
                actionable=True,
            ))

    for alert in budget_alerts:
        if not alert.is_alert:
            continue
        insights.append(FinancialInsight(
            title=f"{alert.category} Budget Alert",
            description=f"You have already used {_round_half_up(alert.percentage)}% of your {alert.category} budget.",
            type="warning",
            actionable=True,
        ))

    progressing = [
        goal for goal in savings_goals
        if _value(_field(goal, "status")) == "active" and _field(goal, "current_amount") > 0
    ]
    if progressing:
        insights.append(FinancialInsight(
            title="Savings Progress",
            description=f"You are making progress on {len(progressing)} savings goal(s).",
            type="success",
            actionable=False,
        ))

    if current_stats.balance > 0:
        insights.append(FinancialInsight(
            title="Positive Month",
            description=f"You finished the month with a positive balance of {format_currency(current_stats.balance)}.",
            type="success",
            actionable=False,
        ))
    elif current_stats.balance < 0:
        insights.append(FinancialInsight(
            title="Negative Month",
            description=f"You finished the month with a deficit of {format_currency(abs(current_stats.balance))}.",
            type="warning",
            actionable=True,
        ))

    return insights


def calculate_total_balance(account_balances: Iterable[int]) -> int:
    return sum(account_balances)


def calculate_available_balance(total_balance: int, budget_spent: int, goals_amount: int) -> int:
    """Balance left after money committed to budgets and savings goals."""
    return total_balance - budget_spent - goals_amount
