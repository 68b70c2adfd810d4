"""
tests.conftest

Shared fixtures: a throwaway SQLite database per test and a fixed label setup.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from review_approvals.db.init_db import init_db
from review_approvals.db.session import create_engine, create_sessionmaker
from review_approvals.labels import LabelType, LabelTypes, LabelValue
from review_approvals.settings import Settings


def _values(low: int, high: int) -> tuple[LabelValue, ...]:
    return tuple(LabelValue(v, f"score {v}") for v in range(low, high + 1))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def label_types() -> LabelTypes:
    return LabelTypes(
        [
            LabelType(
                "Code-Review",
                _values(-2, 2),
                copy_min_score=True,
                copy_all_scores_on_trivial_rebase=True,
            ),
            LabelType("Approved", _values(0, 1), copy_max_score=True),
            LabelType("Verified", _values(-1, 1), copy_all_scores_if_no_code_change=True),
        ]
    )


@pytest_asyncio.fixture
async def session(settings: Settings) -> AsyncIterator[AsyncSession]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        async with create_sessionmaker(engine)() as s:
            yield s
    finally:
        await engine.dispose()
