from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from app.models.common import Category, TransactionType, UTCDatetime


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class RecurringStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class RecurringCreate(BaseModel):
    account_id: str
    amount: int = Field(gt=0)
    type: TransactionType
    category: Category
    description: Optional[str] = Field(default=None, max_length=500)
    frequency: Frequency
    next_occurrence_date: UTCDatetime
    end_date: Optional[UTCDatetime] = None


class RecurringUpdate(BaseModel):
    amount: Optional[int] = Field(default=None, gt=0)
    type: Optional[TransactionType] = None
    category: Optional[Category] = None
    description: Optional[str] = Field(default=None, max_length=500)
    frequency: Optional[Frequency] = None
    next_occurrence_date: Optional[UTCDatetime] = None
    end_date: Optional[UTCDatetime] = None
    status: Optional[RecurringStatus] = None


class RecurringInDB(RecurringCreate):
    user_id: str
    recurring_id: str = Field(default_factory=lambda: uuid4().hex)
    status: RecurringStatus = RecurringStatus.ACTIVE


class RecurringPublic(RecurringCreate):
    recurring_id: str
    status: RecurringStatus
