"""
review_approvals.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, label types and DB sessions.
- Encapsulate app.state access patterns (engine/sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from review_approvals.labels import LabelTypes
from review_approvals.services.change_service import ChangeService


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created on app startup in `review_approvals.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


def label_types_dep(request: Request) -> LabelTypes:
    return request.app.state.label_types  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commits are issued by the service layer.
    async with session_factory() as session:
        yield session


def change_service(
    session: AsyncSession = Depends(db_session),
    label_types: LabelTypes = Depends(label_types_dep),
) -> ChangeService:
    return ChangeService(session=session, label_types=label_types)
