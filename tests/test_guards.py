"""요청 보호 테스트 — 출처 검사와 요청 제한.

Guard tests — Origin checks on refresh/logout, per-route IP budgets,
per-email failure budgets and the global per-IP budget.
"""

import pytest
from httpx import AsyncClient

from budget_overflow.models.user import User
from tests.conftest import ORIGIN, PASSWORD, login

AUTH = "/api/auth"


def register_body(email: str = "new@example.com", password: str = PASSWORD) -> dict[str, str]:
    return {"firstName": "New", "lastName": "User", "email": email, "password": password}


# ===== Origin =====

class TestOriginCheck:
    """리프레시/로그아웃 출처 검사 테스트."""

    async def test_foreign_origin_rejected(self, client: AsyncClient):
        for path in ("/refresh", "/logout"):
            res = await client.post(f"{AUTH}{path}", headers={"Origin": "https://evil.example"})
            assert res.status_code == 403, path
            assert res.json()["detail"] == "Forbidden origin"

    async def test_foreign_referer_rejected(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/refresh", headers={"Referer": "https://evil.example/page"})
        assert res.status_code == 403
        assert res.json()["detail"] == "Forbidden origin"

    async def test_allowed_referer_passes(self, client: AsyncClient):
        """허용된 Referer는 통과 — 이후 쿠키 누락으로 거부."""
        res = await client.post(f"{AUTH}/refresh", headers={"Referer": f"{ORIGIN}/dashboard"})
        assert res.status_code == 403
        assert res.json()["detail"] == "Missing refresh token."

    async def test_missing_origin_passes(self, client: AsyncClient):
        """Origin/Referer가 없으면 검사하지 않음 (Non-browser clients)."""
        res = await client.post(f"{AUTH}/logout")
        assert res.status_code == 200


# ===== Login budgets =====

class TestLoginLimits:
    """로그인 요청 제한 테스트."""

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_LOGIN_EMAIL_FAILURES": "2/10 minutes"}], indirect=True)
    async def test_email_failure_budget(self, client: AsyncClient, user: User):
        """실패 2회 후에는 올바른 비밀번호도 429."""
        for _ in range(2):
            res = await login(client, password="Wrong#1234")
            assert res.status_code == 401

        blocked = await login(client)
        assert blocked.status_code == 429
        assert blocked.json()["detail"] == "Too many login attempts. Try again later."

        # 이메일 정규화 후 같은 키 — Case variants share the budget
        variant = await login(client, email="JANE@example.com")
        assert variant.status_code == 429

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_LOGIN_EMAIL_FAILURES": "2/10 minutes"}], indirect=True)
    async def test_email_budget_is_per_email(self, client: AsyncClient, user: User, other_user: User):
        for _ in range(2):
            await login(client, password="Wrong#1234")
        assert (await login(client)).status_code == 429
        assert (await login(client, email="john@example.com")).status_code == 200

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_LOGIN_EMAIL_FAILURES": "2/10 minutes"}], indirect=True)
    async def test_successful_logins_not_counted(self, client: AsyncClient, user: User):
        for _ in range(4):
            res = await login(client)
            assert res.status_code == 200

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_LOGIN_EMAIL_FAILURES": "2/10 minutes"}], indirect=True)
    async def test_rejected_bodies_count_as_failures(self, client: AsyncClient, user: User):
        """본문 검증 실패(400)도 이메일 실패 예산을 차감."""
        for _ in range(2):
            res = await client.post(f"{AUTH}/login", json={"email": "Jane@Example.com"})
            assert res.status_code == 400

        blocked = await login(client)
        assert blocked.status_code == 429
        assert blocked.json()["detail"] == "Too many login attempts. Try again later."

        # 예산 소진 후에는 잘못된 본문도 429 — Exhausted budget wins over validation
        malformed = await client.post(f"{AUTH}/login", json={"email": "jane@example.com"})
        assert malformed.status_code == 429

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_LOGIN_IP": "2/minute"}], indirect=True)
    async def test_ip_budget_counts_every_request(self, client: AsyncClient, user: User):
        """IP 예산은 성공/실패 모두 차감."""
        assert (await login(client)).status_code == 200
        assert (await login(client, password="Wrong#1234")).status_code == 401

        blocked = await login(client)
        assert blocked.status_code == 429
        assert blocked.json()["detail"] == "Too many requests. Please slow down."


# ===== Register budgets =====

class TestRegisterLimits:
    """회원가입 요청 제한 테스트."""

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_REGISTER_IP": "1/minute"}], indirect=True)
    async def test_ip_budget(self, client: AsyncClient):
        first = await client.post(f"{AUTH}/register", json=register_body())
        assert first.status_code == 201

        blocked = await client.post(f"{AUTH}/register", json=register_body("other@example.com"))
        assert blocked.status_code == 429
        assert blocked.json()["detail"] == "Too many registration attempts. Please slow down."

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_REGISTER_EMAIL_FAILURES": "1/30 minutes"}], indirect=True)
    async def test_email_failure_budget(self, client: AsyncClient):
        """성공은 차감하지 않고, 중복 가입 실패만 차감."""
        assert (await client.post(f"{AUTH}/register", json=register_body())).status_code == 201

        duplicate = await client.post(f"{AUTH}/register", json=register_body())
        assert duplicate.status_code == 409

        blocked = await client.post(f"{AUTH}/register", json=register_body())
        assert blocked.status_code == 429
        assert blocked.json()["detail"] == "Too many registration attempts. Try again later."

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_REGISTER_EMAIL_FAILURES": "1/30 minutes"}], indirect=True)
    async def test_rejected_bodies_count_as_failures(self, client: AsyncClient):
        """약한 비밀번호(400)도 가입 실패로 차감."""
        weak = await client.post(f"{AUTH}/register", json=register_body(password="weak"))
        assert weak.status_code == 400

        blocked = await client.post(f"{AUTH}/register", json=register_body())
        assert blocked.status_code == 429
        assert blocked.json()["detail"] == "Too many registration attempts. Try again later."

        # 다른 이메일은 별도 예산 — Other emails keep their own budget
        other = await client.post(f"{AUTH}/register", json=register_body("other@example.com"))
        assert other.status_code == 201


# ===== Refresh budget =====

class TestRefreshLimits:
    """토큰 갱신 요청 제한 테스트."""

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_REFRESH_IP": "1/minute"}], indirect=True)
    async def test_ip_budget(self, client: AsyncClient):
        first = await client.post(f"{AUTH}/refresh", headers={"Origin": ORIGIN})
        assert first.status_code == 403

        blocked = await client.post(f"{AUTH}/refresh", headers={"Origin": ORIGIN})
        assert blocked.status_code == 429
        assert blocked.json()["detail"] == "Too many token refresh requests. Please slow down."


# ===== Global budget =====

class TestGlobalLimit:
    """전역 IP 요청 제한 테스트."""

    @pytest.mark.parametrize("settings", [{"RATE_LIMIT_DEFAULT": ["2/minute"]}], indirect=True)
    async def test_default_limit_applies_to_every_route(self, client: AsyncClient):
        for _ in range(2):
            assert (await client.get("/healthz")).status_code == 200

        blocked = await client.get("/healthz")
        assert blocked.status_code == 429
        assert blocked.json() == {"detail": "Too many requests. Please slow down."}

    @pytest.mark.parametrize(
        "settings",
        [{"RATE_LIMIT_ENABLED": False, "RATE_LIMIT_DEFAULT": ["1/minute"], "RATE_LIMIT_LOGIN_IP": "1/minute"}],
        indirect=True,
    )
    async def test_disabled_limits(self, client: AsyncClient, user: User):
        for _ in range(3):
            assert (await client.get("/healthz")).status_code == 200
            assert (await login(client)).status_code == 200
