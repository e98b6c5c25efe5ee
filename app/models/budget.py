from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from app.models.common import Category

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class BudgetCreate(BaseModel):
    category: Category
    limit: int = Field(gt=0)  # minor units
    month: str = Field(pattern=MONTH_PATTERN)


class BudgetUpdate(BaseModel):
    category: Optional[Category] = None
    limit: Optional[int] = Field(default=None, gt=0)
    spent: Optional[int] = Field(default=None, ge=0)
    month: Optional[str] = Field(default=None, pattern=MONTH_PATTERN)


class BudgetInDB(BudgetCreate):
    user_id: str
    budget_id: str = Field(default_factory=lambda: uuid4().hex)
    spent: int = 0


class BudgetPublic(BudgetCreate):
    budget_id: str
    spent: int
