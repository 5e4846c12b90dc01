"""카테고리 API 테스트 — 조회 순서, 생성, 중복 검사.

Category API tests — Listing order, creation and case-insensitive
duplicate detection against global and owned categories.
"""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.models.category import Category
from budget_overflow.models.user import User
from budget_overflow.seed import GLOBAL_CATEGORIES, seed_global_categories
from tests.conftest import auth_header

CATEGORIES = "/api/categories"


class TestListCategories:
    """카테고리 목록 테스트."""

    async def test_requires_authentication(self, client: AsyncClient):
        res = await client.get(CATEGORIES)
        assert res.status_code == 401

    async def test_globals_first_then_own(
        self,
        client: AsyncClient,
        db: AsyncSession,
        user: User,
        other_user: User,
        token: str,
        global_categories: dict[str, Category],
    ):
        """전역 카테고리 이름순, 이후 본인 카테고리 이름순 — 타인 카테고리 제외."""
        db.add_all([
            Category(user_id=user.id, name="Zoo"),
            Category(user_id=user.id, name="Aquarium"),
            Category(user_id=other_user.id, name="Secret"),
        ])
        await db.commit()

        res = await client.get(CATEGORIES, headers=auth_header(token))
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Categories fetched successfully"

        names = [c["name"] for c in body["data"]]
        assert names == sorted(GLOBAL_CATEGORIES) + ["Aquarium", "Zoo"]
        assert all(c["userId"] is None for c in body["data"][: len(GLOBAL_CATEGORIES)])
        assert {c["userId"] for c in body["data"][len(GLOBAL_CATEGORIES):]} == {user.id}

    async def test_seed_is_idempotent(self, db: AsyncSession, global_categories: dict[str, Category]):
        assert len(global_categories) == len(GLOBAL_CATEGORIES)
        assert await seed_global_categories(db) == 0


class TestCreateCategory:
    """카테고리 생성 테스트."""

    async def test_create_category(self, client: AsyncClient, user: User, token: str):
        res = await client.post(CATEGORIES, json={"name": "  Pets  "}, headers=auth_header(token))
        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "Category created successfully."
        assert body["data"]["name"] == "Pets"
        assert body["data"]["userId"] == user.id

    async def test_duplicate_of_global_rejected(
        self, client: AsyncClient, token: str, global_categories: dict[str, Category]
    ):
        res = await client.post(CATEGORIES, json={"name": "groceries"}, headers=auth_header(token))
        assert res.status_code == 409
        assert res.json()["detail"] == "Category already exists."

    async def test_duplicate_of_own_rejected(self, client: AsyncClient, token: str):
        first = await client.post(CATEGORIES, json={"name": "Pets"}, headers=auth_header(token))
        assert first.status_code == 201

        res = await client.post(CATEGORIES, json={"name": "PETS"}, headers=auth_header(token))
        assert res.status_code == 409

    async def test_same_name_for_different_users(self, client: AsyncClient, token: str, other_token: str):
        assert (await client.post(CATEGORIES, json={"name": "Pets"}, headers=auth_header(token))).status_code == 201
        res = await client.post(CATEGORIES, json={"name": "Pets"}, headers=auth_header(other_token))
        assert res.status_code == 201

    async def test_blank_name(self, client: AsyncClient, token: str):
        for body in ({}, {"name": ""}, {"name": "   "}, {"name": 5}):
            res = await client.post(CATEGORIES, json=body, headers=auth_header(token))
            assert res.status_code == 400, body
            assert res.json()["detail"] == "Name is required."

    async def test_name_too_long(self, client: AsyncClient, token: str):
        res = await client.post(CATEGORIES, json={"name": "x" * 101}, headers=auth_header(token))
        assert res.status_code == 400

    async def test_requires_authentication(self, client: AsyncClient):
        res = await client.post(CATEGORIES, json={"name": "Pets"})
        assert res.status_code == 401
