from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.db import dynamo
from app.models.account import AccountCreate, AccountInDB, AccountPublic, AccountUpdate
from app.routers.auth import get_current_user_id

router = APIRouter()


@router.get("/", response_model=List[AccountPublic])
def list_accounts(user_id: str = Depends(get_current_user_id)):
    return dynamo.get_user_accounts(user_id)


@router.get("/{account_id}", response_model=AccountPublic)
def get_account(account_id: str, user_id: str = Depends(get_current_user_id)):
    account = dynamo.get_account(user_id, account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


@router.post("/", response_model=AccountPublic, status_code=status.HTTP_201_CREATED)
def create_account(account: AccountCreate, user_id: str = Depends(get_current_user_id)):
    account_db = AccountInDB(user_id=user_id, **account.model_dump())
    if not dynamo.put_account(account_db.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save account")
    return account_db


@router.put("/{account_id}", response_model=AccountPublic)
def update_account(
    account_id: str,
    account_update: AccountUpdate,
    user_id: str = Depends(get_current_user_id),
):
    fields = account_update.model_dump(mode="json", exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = dynamo.update_account(user_id, account_id, fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Account not found")
    return updated


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(account_id: str, user_id: str = Depends(get_current_user_id)):
    if not dynamo.delete_account(user_id, account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    return None
