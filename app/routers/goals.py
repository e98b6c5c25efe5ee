from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.db import dynamo
from app.models.savings_goal import (
    SavingsGoalCreate,
    SavingsGoalInDB,
    SavingsGoalProgress,
    SavingsGoalPublic,
    SavingsGoalUpdate,
)
from app.routers.auth import get_current_user_id

router = APIRouter()


@router.get("/", response_model=List[SavingsGoalPublic])
def list_goals(user_id: str = Depends(get_current_user_id)):
    return dynamo.get_user_savings_goals(user_id)


@router.post("/", response_model=SavingsGoalPublic, status_code=status.HTTP_201_CREATED)
def create_goal(goal: SavingsGoalCreate, user_id: str = Depends(get_current_user_id)):
    goal_db = SavingsGoalInDB(user_id=user_id, **goal.model_dump())
    if not dynamo.put_savings_goal(goal_db.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save savings goal")
    return goal_db


@router.put("/{goal_id}", response_model=SavingsGoalPublic)
def update_goal(goal_id: str, goal_update: SavingsGoalUpdate, user_id: str = Depends(get_current_user_id)):
    fields = goal_update.model_dump(mode="json", exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    return _apply_update(user_id, goal_id, fields)


@router.patch("/{goal_id}/progress", response_model=SavingsGoalPublic)
def update_goal_progress(
    goal_id: str,
    progress: SavingsGoalProgress,
    user_id: str = Depends(get_current_user_id),
):
    return _apply_update(user_id, goal_id, {"current_amount": progress.current_amount})


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(goal_id: str, user_id: str = Depends(get_current_user_id)):
    if not dynamo.delete_savings_goal(user_id, goal_id):
        raise HTTPException(status_code=404, detail="Savings goal not found")
    return None


def _apply_update(user_id: str, goal_id: str, fields: dict):
    updated = dynamo.update_savings_goal(user_id, goal_id, fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Savings goal not found")
    return updated
