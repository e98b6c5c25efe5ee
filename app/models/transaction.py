from datetime import datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from app.models.common import Category, TransactionType, UTCDatetime


class TransactionCreate(BaseModel):
    account_id: str
    amount: int = Field(gt=0)  # minor units, sign carried by type
    type: TransactionType
    # Left empty, the category is assigned by the categorizer.
    category: Optional[Category] = None
    description: Optional[str] = Field(default=None, max_length=500)
    transaction_date: UTCDatetime
    is_recurring: bool = False
    recurring_id: Optional[str] = None


class TransactionCategoryUpdate(BaseModel):
    category: Category


class CategorizeRequest(BaseModel):
    description: str = ""
    amount: int = Field(gt=0)
    type: TransactionType


class TransactionInDB(BaseModel):
    user_id: str
    transaction_id: str = Field(default_factory=lambda: uuid4().hex)
    account_id: str
    amount: int
    type: TransactionType
    category: Category
    description: Optional[str] = None
    transaction_date: UTCDatetime
    is_recurring: bool = False
    recurring_id: Optional[str] = None
    categorized_automatically: bool = True
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class TransactionPublic(BaseModel):
    transaction_id: str
    account_id: str
    amount: int
    type: TransactionType
    category: Category
    description: Optional[str] = None
    transaction_date: datetime
    is_recurring: bool = False
    recurring_id: Optional[str] = None
    categorized_automatically: bool = True
