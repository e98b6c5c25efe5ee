from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from uuid import uuid4
from datetime import datetime


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=2)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserInDB(BaseModel):
    user_id: str = Field(default_factory=lambda: str(uuid4()))
    email: EmailStr
    name: str
    password_hash: str
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class UserPublic(BaseModel):
    user_id: str
    email: EmailStr
    name: str
    created_at: str
