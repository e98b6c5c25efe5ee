from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "PersonalFinanceTracker"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000", "http://localhost:8000"])

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_TABLE_USERS: str = Field(default="finance-users")
    DYNAMO_TABLE_ACCOUNTS: str = Field(default="finance-accounts")
    DYNAMO_TABLE_TRANSACTIONS: str = Field(default="finance-transactions")
    DYNAMO_TABLE_RECURRING: str = Field(default="finance-recurring-transactions")
    DYNAMO_TABLE_BUDGETS: str = Field(default="finance-budgets")
    DYNAMO_TABLE_GOALS: str = Field(default="finance-savings-goals")

    # JWT Authentication
    JWT_SECRET: str = Field(default="change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Categorization ("rules" is the only backend shipped)
    CATEGORIZER_BACKEND: str = Field(default="rules")

    # Recurring transactions job (daily, UTC)
    RECURRING_SCHEDULER_ENABLED: bool = Field(default=True)
    RECURRING_SCHEDULER_HOUR: int = Field(default=3)
    RECURRING_SCHEDULER_MINUTE: int = Field(default=0)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
