from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.db import dynamo
from app.models.budget import MONTH_PATTERN, BudgetCreate, BudgetInDB, BudgetPublic, BudgetUpdate
from app.routers.auth import get_current_user_id

router = APIRouter()


@router.get("/", response_model=List[BudgetPublic])
def list_budgets(
    month: str = Query(..., pattern=MONTH_PATTERN),
    user_id: str = Depends(get_current_user_id),
):
    """month must follow YYYY-MM format. Example: 2025-11"""
    return dynamo.get_user_budgets(user_id, month)


@router.post("/", response_model=BudgetPublic, status_code=status.HTTP_201_CREATED)
def create_budget(budget: BudgetCreate, user_id: str = Depends(get_current_user_id)):
    budget_db = BudgetInDB(user_id=user_id, **budget.model_dump())
    if not dynamo.put_budget(budget_db.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save budget")
    return budget_db


@router.put("/{budget_id}", response_model=BudgetPublic)
def update_budget(budget_id: str, budget_update: BudgetUpdate, user_id: str = Depends(get_current_user_id)):
    fields = budget_update.model_dump(mode="json", exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = dynamo.update_budget(user_id, budget_id, fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Budget not found")
    return updated


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget(budget_id: str, user_id: str = Depends(get_current_user_id)):
    if not dynamo.delete_budget(user_id, budget_id):
        raise HTTPException(status_code=404, detail="Budget not found")
    return None
