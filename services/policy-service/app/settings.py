from __future__ import annotations

from typing import List, Literal

from pydantic import Field, Json
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POLICY_", env_file=".env", extra="ignore")

    # API
    PORT: int = 8040
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: Json[List[str]] = Field(default="[]")

    # Storage: "mongo" for deployments, "memory" for local runs and tests
    STORE_BACKEND: Literal["mongo", "memory"] = "mongo"

    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "policy"

    # Collections
    COL_POLICIES: str = "policies"
    COL_ATTACHMENTS: str = "policy_attachments"

    # Addressing
    URN_NAMESPACE: str = "revet"   # urn:<namespace>:<service>::<type>/<id>
    ACTION_SERVICE: str = "documents"


settings = Settings()
