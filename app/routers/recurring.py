from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.db import dynamo
from app.models.recurring import RecurringCreate, RecurringInDB, RecurringPublic, RecurringUpdate
from app.routers.auth import get_current_user_id

router = APIRouter()


@router.get("/", response_model=List[RecurringPublic])
def list_recurring_transactions(user_id: str = Depends(get_current_user_id)):
    return dynamo.get_user_recurring_transactions(user_id)


@router.post("/", response_model=RecurringPublic, status_code=status.HTTP_201_CREATED)
def create_recurring_transaction(recurring: RecurringCreate, user_id: str = Depends(get_current_user_id)):
    if not dynamo.get_account(user_id, recurring.account_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account not found")

    recurring_db = RecurringInDB(user_id=user_id, **recurring.model_dump())
    if not dynamo.put_recurring_transaction(recurring_db.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save recurring transaction")
    return recurring_db


@router.put("/{recurring_id}", response_model=RecurringPublic)
def update_recurring_transaction(
    recurring_id: str,
    recurring_update: RecurringUpdate,
    user_id: str = Depends(get_current_user_id),
):
    fields = recurring_update.model_dump(mode="json", exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = dynamo.update_recurring_transaction(user_id, recurring_id, fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Recurring transaction not found")
    return updated


@router.delete("/{recurring_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recurring_transaction(recurring_id: str, user_id: str = Depends(get_current_user_id)):
    if not dynamo.delete_recurring_transaction(user_id, recurring_id):
        raise HTTPException(status_code=404, detail="Recurring transaction not found")
    return None
