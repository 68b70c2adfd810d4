"""
tests.test_smoke

HTTP-level tests: the app boots, probes answer, and change endpoints round-trip through the store.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from review_approvals.api.app import create_app
from review_approvals.db.models import SUBMIT
from review_approvals.db.repositories.categories import ApprovalCategoryRepo
from review_approvals.settings import Settings


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.headers["x-request-id"]

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_change_reviewer_flow(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/changes",
        json={"owner_account_id": 1, "subject": "Add feature", "author_account_id": 2},
    )
    assert r.status_code == 201
    change_id = r.json()["change_id"]
    assert r.json()["patch_set"] == 1

    r = await client.post(f"/v1/changes/{change_id}/reviewers", json={"reviewers": [3, 1, 2]})
    assert r.status_code == 200
    assert [a["account_id"] for a in r.json()["added"]] == [3]
    assert r.json()["added"][0] == {
        "change_id": change_id,
        "patch_set": 1,
        "account_id": 3,
        "label": "Verified",
        "value": 0,
    }

    r = await client.post(
        f"/v1/changes/{change_id}/patch-sets",
        json={"change_kind": "TRIVIAL_REBASE", "reviewers": [4]},
    )
    assert r.status_code == 201
    assert r.json() == {"change_id": change_id, "patch_set": 2}

    r = await client.get(f"/v1/changes/{change_id}/reviewers")
    assert r.status_code == 200
    assert r.json() == {"REVIEWER": [], "CC": [2, 3, 4]}


@pytest.mark.asyncio
async def test_unknown_change_is_404(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/changes/999/reviewers")
    assert r.status_code == 404
    r = await client.post("/v1/changes/999/reviewers", json={"reviewers": [5]})
    assert r.status_code == 404
    r = await client.post("/v1/changes/999/patch-sets", json={})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_invalid_change_kind_rejected(client: httpx.AsyncClient) -> None:
    r = await client.post("/v1/changes", json={"owner_account_id": 1})
    change_id = r.json()["change_id"]
    r = await client.post(f"/v1/changes/{change_id}/patch-sets", json={"change_kind": "MERGE"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_approval_categories(app: FastAPI, client: httpx.AsyncClient) -> None:
    async with app.state.sessionmaker() as session:
        repo = ApprovalCategoryRepo(session)
        await repo.upsert(category_id="CRVW", name="Code Review", position=1)
        await repo.upsert(category_id="VRIF", name="Verified", position=0)
        await repo.upsert(category_id=SUBMIT, name="Submit", position=-1)
        await session.commit()

    r = await client.get("/v1/approval-categories")
    assert r.status_code == 200
    body = r.json()
    assert [c["id"] for c in body["columns"]] == ["VRIF", "CRVW"]
    assert body["actions"] == [{"id": SUBMIT, "name": "Submit", "position": -1}]
