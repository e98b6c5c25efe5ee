import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool

from app.db import dynamo
from app.models.transaction import (
    CategorizeRequest,
    TransactionCategoryUpdate,
    TransactionCreate,
    TransactionInDB,
    TransactionPublic,
)
from app.routers.auth import get_current_user_id
from app.services.categorization import get_categorizer
from app.utils.dates import to_naive_utc

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[TransactionPublic])
def list_transactions(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
):
    return dynamo.get_user_transactions(user_id, limit, offset)


@router.get("/range", response_model=List[TransactionPublic])
def list_transactions_by_date_range(
    start_date: datetime,
    end_date: datetime,
    user_id: str = Depends(get_current_user_id),
):
    """Transactions dated between start_date and end_date, both inclusive."""
    start = to_naive_utc(start_date)
    end = to_naive_utc(end_date)
    if start > end:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")
    return dynamo.get_transactions_by_date_range(user_id, start.isoformat(), end.isoformat())


@router.post("/categorize")
async def preview_category(request: CategorizeRequest, user_id: str = Depends(get_current_user_id)):
    """Suggest a category without storing anything."""
    result = await get_categorizer().categorize(request.description, request.amount, request.type)
    return result.to_dict()


@router.post("/", response_model=TransactionPublic, status_code=status.HTTP_201_CREATED)
async def create_transaction(transaction: TransactionCreate, user_id: str = Depends(get_current_user_id)):
    account = await run_in_threadpool(dynamo.get_account, user_id, transaction.account_id)
    if not account:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account not found")

    data = transaction.model_dump()
    if transaction.category is None:
        result = await get_categorizer().categorize(
            transaction.description or "",
            transaction.amount,
            transaction.type,
        )
        data["category"] = result.category
        data["categorized_automatically"] = result.automatic
        logger.info(
            f"Auto-categorized transaction for user {user_id} as {result.category.value} "
            f"(confidence={result.confidence:.2f})"
        )
    else:
        data["categorized_automatically"] = False

    transaction_db = TransactionInDB(user_id=user_id, **data)
    saved = await run_in_threadpool(dynamo.put_transaction, transaction_db.model_dump(mode="json"))
    if not saved:
        raise HTTPException(status_code=500, detail="Failed to save transaction")
    return transaction_db


@router.patch("/{transaction_id}/category", response_model=TransactionPublic)
def update_transaction_category(
    transaction_id: str,
    update: TransactionCategoryUpdate,
    user_id: str = Depends(get_current_user_id),
):
    updated = dynamo.update_transaction(
        user_id,
        transaction_id,
        {"category": update.category.value, "categorized_automatically": False},
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return updated


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id)):
    if not dynamo.delete_transaction(user_id, transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    return None
