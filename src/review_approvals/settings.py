"""
review_approvals.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the API, persistence and label layers.
- Describe the configured label types in declaration order.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LabelSettings(BaseModel):
    """
    One scoring dimension as configured by the operator.

    `values` maps a score to its display text, e.g. {-1: "Fails", 1: "Verified"}.
    """

    name: str = Field(min_length=1, max_length=64)
    values: dict[int, str] = Field(default_factory=dict)

    copy_min_score: bool = False
    copy_max_score: bool = False
    copy_all_scores_on_trivial_rebase: bool = False
    copy_all_scores_if_no_code_change: bool = False


def _default_labels() -> list[LabelSettings]:
    return [
        LabelSettings(
            name="Code-Review",
            values={
                -2: "This shall not be merged",
                -1: "I would prefer this is not merged as is",
                0: "No score",
                1: "Looks good to me, but someone else must approve",
                2: "Looks good to me, approved",
            },
            copy_min_score=True,
            copy_all_scores_on_trivial_rebase=True,
        ),
        LabelSettings(
            name="Verified",
            values={-1: "Fails", 0: "No score", 1: "Verified"},
        ),
    ]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RA_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "review-approvals"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./review_approvals.db"

    # Labels, highest priority first. Placeholder approvals use the last entry.
    labels: list[LabelSettings] = Field(default_factory=_default_labels)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# RA_LABELS accepts a JSON list, e.g.
#   RA_LABELS='[{"name": "Verified", "values": {"-1": "Fails", "1": "Ok"}}]'
