from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from app.models.common import UTCDatetime


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class SavingsGoalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    target_amount: int = Field(gt=0)
    target_date: UTCDatetime
    description: Optional[str] = None


class SavingsGoalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    target_amount: Optional[int] = Field(default=None, gt=0)
    target_date: Optional[UTCDatetime] = None
    description: Optional[str] = None
    status: Optional[GoalStatus] = None


class SavingsGoalProgress(BaseModel):
    current_amount: int = Field(ge=0)


class SavingsGoalInDB(SavingsGoalCreate):
    user_id: str
    goal_id: str = Field(default_factory=lambda: uuid4().hex)
    current_amount: int = 0
    status: GoalStatus = GoalStatus.ACTIVE


class SavingsGoalPublic(SavingsGoalCreate):
    goal_id: str
    current_amount: int
    status: GoalStatus
