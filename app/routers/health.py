"""
Health Check Router
Liveness plus DynamoDB table reachability
"""
import logging
from datetime import datetime

from fastapi import APIRouter

from app.core.config import settings
from app.db import dynamo
from app.utils.scheduler import get_scheduler_status

router = APIRouter()
logger = logging.getLogger(__name__)

_TABLES = {
    "users": dynamo.users_table,
    "accounts": dynamo.accounts_table,
    "transactions": dynamo.transactions_table,
    "recurring": dynamo.recurring_table,
    "budgets": dynamo.budgets_table,
    "goals": dynamo.goals_table,
}


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/status")
def services_status():
    """
    Check that every DynamoDB table answers a one-item scan, and report the
    recurring-transactions scheduler.
    """
    tables = {}
    for label, table in _TABLES.items():
        try:
            table.scan(Limit=1)
            tables[label] = {"name": table.name, "status": "accessible"}
        except Exception as e:
            logger.error(f"DynamoDB check failed for {table.name}: {str(e)}")
            tables[label] = {"name": table.name, "status": "error", "error": str(e)}

    connected = all(table["status"] == "accessible" for table in tables.values())
    return {
        "timestamp": datetime.utcnow().isoformat(),
        "services": {
            "dynamodb": {
                "connected": connected,
                "region": settings.DYNAMO_REGION,
                "tables": tables,
            },
            "scheduler": get_scheduler_status(),
        },
        "overall_status": "healthy" if connected else "degraded",
    }
