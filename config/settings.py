from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Core
    ENVIRONMENT: str = Field(default="production")
    LOG_LEVEL: str = Field(default="INFO")
    FIRESTORE_PROJECT_ID: str = Field(default="")

    # Operator/admin auth (Google OIDC ID token) for /reindex
    OPERATOR_AUTH_AUDIENCE: str = Field(default="")
    OPERATOR_INVOKER_SUBS: str = Field(default="")  # comma-separated
    OPERATOR_INVOKER_EMAILS: str = Field(default="")  # comma-separated

    # Algolia (secrets come from the runtime environment only)
    ALGOLIA_APP_ID: str = Field(default="")
    ALGOLIA_ADMIN_KEY: str = Field(default="")
    ALGOLIA_SEARCH_KEY: str = Field(default="")  # handed to clients, never used for writes
    ALGOLIA_WRITE_HOST: str = Field(default="")  # defaults to https://{app_id}.algolia.net
    ALGOLIA_TIMEOUT_S: float = Field(default=30.0)

    # Index names
    PACKAGES_INDEX: str = Field(default="packages")
    TOPICS_INDEX: str = Field(default="topics")
    CONVERSATIONS_INDEX: str = Field(default="conversations")

    # Reindex
    REINDEX_MAX_DOCS: int = Field(default=50000)


settings = Settings()
