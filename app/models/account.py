from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class AccountType(str, Enum):
    BANK_ACCOUNT = "bank_account"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    DIGITAL_WALLET = "digital_wallet"
    INVESTMENT = "investment"
    OTHER = "other"


class AccountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: AccountType
    balance: int = Field(ge=0)  # minor units
    currency: str = Field(default="BRL", min_length=3, max_length=3)
    description: Optional[str] = None


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[AccountType] = None
    balance: Optional[int] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    description: Optional[str] = None


class AccountInDB(AccountCreate):
    user_id: str
    account_id: str = Field(default_factory=lambda: uuid4().hex)
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class AccountPublic(BaseModel):
    account_id: str
    name: str
    type: AccountType
    balance: int
    currency: str
    description: Optional[str] = None
