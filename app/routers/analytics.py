import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from app.db import dynamo
from app.models.budget import MONTH_PATTERN
from app.routers.auth import get_current_user_id
from app.services import analytics
from app.utils.dates import format_month, month_bounds, previous_month

router = APIRouter()
logger = logging.getLogger(__name__)


def _month_transactions(user_id: str, month: str) -> List[dict]:
    start, end = month_bounds(month)
    return dynamo.get_transactions_by_date_range(user_id, start.isoformat(), end.isoformat())


@router.get("/dashboard")
def dashboard(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    """Headline figures for a month (the current one by default)."""
    month = month or format_month()
    try:
        start, end = month_bounds(month)
        accounts = dynamo.get_user_accounts(user_id)
        transactions = _month_transactions(user_id, month)
        budgets = dynamo.get_user_budgets(user_id, month)
        goals = dynamo.get_user_savings_goals(user_id)

        stats = analytics.calculate_monthly_stats(transactions, month)
        budget_alerts = analytics.generate_budget_alerts(budgets)
        category_spending = analytics.calculate_category_spending(transactions, start, end)

        return {
            "month": month,
            "total_balance": analytics.calculate_total_balance(a["balance"] for a in accounts),
            "income": stats.income,
            "expenses": stats.expenses,
            "balance": stats.balance,
            "account_count": len(accounts),
            "budget_alerts": [alert.to_dict() for alert in budget_alerts],
            "category_spending": [item.to_dict() for item in category_spending],
            "goals_count": sum(1 for g in goals if g.get("status") == "active"),
        }
    except Exception as e:
        logger.error(f"Error building dashboard for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to build dashboard")


@router.get("/insights")
def insights(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    user_id: str = Depends(get_current_user_id),
) -> List[Dict]:
    """Insights for a month (the current one by default) against the month before."""
    month = month or format_month()
    prev = previous_month(month)
    try:
        logger.info(f"Generating insights for user_id: {user_id}, month: {month}")
        start, end = month_bounds(month)
        current_transactions = _month_transactions(user_id, month)
        previous_transactions = _month_transactions(user_id, prev)

        current_stats = analytics.calculate_monthly_stats(current_transactions, month)
        previous_stats = analytics.calculate_monthly_stats(previous_transactions, prev)
        category_spending = analytics.calculate_category_spending(current_transactions, start, end)
        budget_alerts = analytics.generate_budget_alerts(dynamo.get_user_budgets(user_id, month))
        goals = dynamo.get_user_savings_goals(user_id)

        result = analytics.generate_financial_insights(
            current_stats,
            previous_stats,
            category_spending,
            budget_alerts,
            goals,
        )
        return [insight.to_dict() for insight in result]
    except Exception as e:
        logger.error(f"Error generating insights for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate insights")


@router.get("/monthly/{month}")
def monthly_stats(
    month: str = Path(..., pattern=MONTH_PATTERN),
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    """
    month must follow YYYY-MM format. Example: 2025-11
    """
    try:
        transactions = _month_transactions(user_id, month)
        return analytics.calculate_monthly_stats(transactions, month).to_dict()
    except Exception as e:
        logger.error(f"Error computing monthly stats for user {user_id}, month {month}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to compute monthly stats")
