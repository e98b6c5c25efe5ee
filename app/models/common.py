from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator

from app.utils.dates import to_naive_utc


class Category(str, Enum):
    # Order matters: keyword ties are resolved by this order.
    FOOD = "food"
    TRANSPORTATION = "transportation"
    HEALTH = "health"
    EDUCATION = "education"
    ENTERTAINMENT = "entertainment"
    SUBSCRIPTIONS = "subscriptions"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    SALARY = "salary"
    INVESTMENT = "investment"
    OTHER = "other"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


# Timestamps are stored as naive UTC so ISO strings compare lexicographically.
UTCDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]
