"""
DynamoDB persistence.

Every entity table uses ``user_id`` as partition key and an entity id as sort
key, so a lookup can never reach another user's rows. Failures are logged and
reported as ``None`` / ``False`` / ``[]``; the routers decide the HTTP status.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)

# Get table references
users_table = dynamodb.Table(settings.DYNAMO_TABLE_USERS)
accounts_table = dynamodb.Table(settings.DYNAMO_TABLE_ACCOUNTS)
transactions_table = dynamodb.Table(settings.DYNAMO_TABLE_TRANSACTIONS)
recurring_table = dynamodb.Table(settings.DYNAMO_TABLE_RECURRING)
budgets_table = dynamodb.Table(settings.DYNAMO_TABLE_BUDGETS)
goals_table = dynamodb.Table(settings.DYNAMO_TABLE_GOALS)


def _error_message(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Message", str(e))


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def _put(table, item: dict) -> bool:
    try:
        table.put_item(Item=_convert_for_dynamo(item))
        return True
    except ClientError as e:
        logger.error(f"put_item on {table.name} failed: {_error_message(e)}")
        return False


def _get(table, key: dict) -> Optional[dict]:
    try:
        response = table.get_item(Key=key)
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_item on {table.name} failed: {_error_message(e)}")
        return None


def _query_user(table, user_id: str, filter_expression=None) -> List[dict]:
    """All items of a user, following DynamoDB pagination."""
    kwargs: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
    if filter_expression is not None:
        kwargs["FilterExpression"] = filter_expression

    items: List[dict] = []
    try:
        while True:
            response = table.query(**kwargs)
            items.extend(_from_dynamo(item) for item in response["Items"])
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key
    except ClientError as e:
        logger.error(f"query on {table.name} failed: {_error_message(e)}")
        return []


def _update(table, key: dict, updates: dict) -> Optional[dict]:
    """
    Apply partial updates to an existing item. Returns the updated item, or
    None when the item does not exist or the write failed.
    """
    if not updates:
        return None

    update_expression_parts = []
    expression_attribute_values = {}
    expression_attribute_names = {}

    for idx, (attr, value) in enumerate(updates.items()):
        placeholder = f"#f{idx}"
        value_placeholder = f":v{idx}"
        update_expression_parts.append(f"{placeholder} = {value_placeholder}")
        expression_attribute_names[placeholder] = attr
        expression_attribute_values[value_placeholder] = value

    try:
        response = table.update_item(
            Key=key,
            UpdateExpression="SET " + ", ".join(update_expression_parts),
            ConditionExpression=Attr("user_id").exists(),
            ExpressionAttributeNames=expression_attribute_names,
            ExpressionAttributeValues=_convert_for_dynamo(expression_attribute_values),
            ReturnValues="ALL_NEW",
        )
        attributes = response.get("Attributes")
        return _from_dynamo(attributes) if attributes else None
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
            return None
        logger.error(f"update_item on {table.name} failed: {_error_message(e)}")
        return None


def _delete(table, key: dict) -> bool:
    try:
        response = table.delete_item(Key=key, ReturnValues="ALL_OLD")
        return "Attributes" in response
    except ClientError as e:
        logger.error(f"delete_item on {table.name} failed: {_error_message(e)}")
        return False


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def get_user_by_email(email: str):
    """Query the Users table by email (assumes a GSI exists on email)."""
    try:
        response = users_table.query(
            IndexName="email-index",
            KeyConditionExpression=Key("email").eq(email),
        )
        return _from_dynamo(response["Items"][0]) if response["Items"] else None
    except ClientError as e:
        logger.error(f"get_user_by_email failed: {_error_message(e)}")
        return None


def get_user_by_id(user_id: str):
    return _get(users_table, {"user_id": user_id})


def put_user(user_item: dict):
    return _put(users_table, user_item)


def get_all_user_ids() -> List[str]:
    """Scan the Users table for every user id."""
    user_ids: List[str] = []
    kwargs: Dict[str, Any] = {"ProjectionExpression": "user_id"}
    try:
        while True:
            response = users_table.scan(**kwargs)
            user_ids.extend(item["user_id"] for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return user_ids
            kwargs["ExclusiveStartKey"] = last_key
    except ClientError as e:
        logger.error(f"get_all_user_ids failed: {_error_message(e)}")
        return []


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

def get_user_accounts(user_id: str):
    return _query_user(accounts_table, user_id)


def get_account(user_id: str, account_id: str):
    return _get(accounts_table, {"user_id": user_id, "account_id": account_id})


def put_account(account_item: dict):
    return _put(accounts_table, account_item)


def update_account(user_id: str, account_id: str, updates: dict):
    return _update(accounts_table, {"user_id": user_id, "account_id": account_id}, updates)


def delete_account(user_id: str, account_id: str):
    return _delete(accounts_table, {"user_id": user_id, "account_id": account_id})


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

def get_user_transactions(user_id: str, limit: int = 50, offset: int = 0):
    """Newest first, paginated by limit/offset."""
    items = _query_user(transactions_table, user_id)
    items.sort(key=lambda item: item.get("transaction_date", ""), reverse=True)
    return items[offset:offset + limit]


def get_transactions_by_date_range(user_id: str, start_date: str, end_date: str):
    """
    Transactions whose ISO ``transaction_date`` lies within
    [start_date, end_date], both inclusive.
    """
    return _query_user(
        transactions_table,
        user_id,
        Attr("transaction_date").between(start_date, end_date),
    )


def get_transaction(user_id: str, transaction_id: str):
    return _get(transactions_table, {"user_id": user_id, "transaction_id": transaction_id})


def put_transaction(transaction_item: dict):
    return _put(transactions_table, transaction_item)


def update_transaction(user_id: str, transaction_id: str, updates: dict):
    return _update(transactions_table, {"user_id": user_id, "transaction_id": transaction_id}, updates)


def delete_transaction(user_id: str, transaction_id: str):
    return _delete(transactions_table, {"user_id": user_id, "transaction_id": transaction_id})


# ---------------------------------------------------------------------------
# Recurring transactions
# ---------------------------------------------------------------------------

def get_user_recurring_transactions(user_id: str):
    return _query_user(recurring_table, user_id)


def get_recurring_transaction(user_id: str, recurring_id: str):
    return _get(recurring_table, {"user_id": user_id, "recurring_id": recurring_id})


def put_recurring_transaction(recurring_item: dict):
    return _put(recurring_table, recurring_item)


def update_recurring_transaction(user_id: str, recurring_id: str, updates: dict):
    return _update(recurring_table, {"user_id": user_id, "recurring_id": recurring_id}, updates)


def delete_recurring_transaction(user_id: str, recurring_id: str):
    return _delete(recurring_table, {"user_id": user_id, "recurring_id": recurring_id})


# ---------------------------------------------------------------------------
# Budgets
# ---------------------------------------------------------------------------

def get_user_budgets(user_id: str, month: str):
    return _query_user(budgets_table, user_id, Attr("month").eq(month))


def put_budget(budget_item: dict):
    return _put(budgets_table, budget_item)


def update_budget(user_id: str, budget_id: str, updates: dict):
    return _update(budgets_table, {"user_id": user_id, "budget_id": budget_id}, updates)


def delete_budget(user_id: str, budget_id: str):
    return _delete(budgets_table, {"user_id": user_id, "budget_id": budget_id})


# ---------------------------------------------------------------------------
# Savings goals
# ---------------------------------------------------------------------------

def get_user_savings_goals(user_id: str):
    return _query_user(goals_table, user_id)


def put_savings_goal(goal_item: dict):
    return _put(goals_table, goal_item)


def update_savings_goal(user_id: str, goal_id: str, updates: dict):
    return _update(goals_table, {"user_id": user_id, "goal_id": goal_id}, updates)


def delete_savings_goal(user_id: str, goal_id: str):
    return _delete(goals_table, {"user_id": user_id, "goal_id": goal_id})


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
