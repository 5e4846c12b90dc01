"""유틸리티 단위 테스트 — 입력 검증, 액세스 토큰, 비밀번호 해싱, 리프레시 토큰.

Unit tests for the pure helpers: input validation, access token issuing,
password hashing and refresh token hashing.
"""

from datetime import date, datetime, timedelta, timezone

import jwt
import pytest

from budget_overflow.middleware.axiom_logging import mask_sensitive
from budget_overflow.utils.jwt import TokenIssuer
from budget_overflow.utils.pagination import clamp_page
from budget_overflow.utils.password import PasswordHasher
from budget_overflow.utils.refresh_token import generate_raw_refresh_token, hash_refresh_token
from budget_overflow.utils.validators import (
    is_strong_password,
    is_valid_email,
    is_valid_name,
    normalize_email,
    parse_iso_date,
)
from tests.conftest import make_settings


class TestValidators:
    """입력 검증 규칙 테스트."""

    def test_names(self):
        for name in ("Jo", "Mary Ann", "O'Neil", "St. John", "A" * 20):
            assert is_valid_name(name), name
        for name in ("J", "A" * 21, "Jane3", "Jane-Doe", "Jane  Doe", " Jane", ""):
            assert not is_valid_name(name), name

    def test_email(self):
        assert normalize_email("  Jane@Example.COM ") == "jane@example.com"
        assert is_valid_email("jane@example.com")
        for email in ("jane", "jane@example", "ja ne@example.com", "@example.com", "a@b.c" + "c" * 250):
            assert not is_valid_email(email), email

    def test_password_policy(self):
        assert is_strong_password("Secret#123")
        for password in ("Sh#1a", "secret#123", "SECRET#123", "Secret#abc", "Secret1234", "Secret#123456789012345"):
            assert not is_strong_password(password), password

    def test_parse_iso_date(self):
        assert parse_iso_date("2025-03-04") == date(2025, 3, 4)
        assert parse_iso_date(" 2025-03-04T23:30:00Z ") == date(2025, 3, 4)
        for value in ("2025-02-30", "03/04/2025", ""):
            with pytest.raises(ValueError):
                parse_iso_date(value)

    def test_clamp_page(self):
        assert clamp_page(None, None) == (1, 20)
        assert clamp_page(-3, 1000) == (1, 100)
        assert clamp_page(4, -1) == (4, 1)


class TestTokenIssuer:
    """액세스 토큰 발급/검증 테스트."""

    def test_round_trip(self):
        settings = make_settings()
        issuer = TokenIssuer(settings)
        token = issuer.create_access_token(42)

        payload = issuer.decode_token(token)
        assert payload["sub"] == "42"
        assert payload["userId"] == 42
        assert payload["iss"] == settings.JWT_ISSUER
        assert payload["aud"] == settings.JWT_AUDIENCE
        assert payload["exp"] - payload["iat"] == settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60
        assert issuer.user_id_from_token(token) == 42

    def test_wrong_secret(self):
        token = TokenIssuer(make_settings(JWT_SECRET_KEY="other-secret")).create_access_token(1)
        with pytest.raises(jwt.InvalidTokenError):
            TokenIssuer(make_settings()).user_id_from_token(token)

    def test_wrong_issuer(self):
        token = TokenIssuer(make_settings(JWT_ISSUER="someone-else")).create_access_token(1)
        with pytest.raises(jwt.InvalidTokenError):
            TokenIssuer(make_settings()).user_id_from_token(token)

    def test_expired(self):
        settings = make_settings()
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {
                "sub": "1",
                "type": "access",
                "iss": settings.JWT_ISSUER,
                "aud": settings.JWT_AUDIENCE,
                "exp": past,
            },
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            TokenIssuer(settings).user_id_from_token(token)

    def test_wrong_type(self):
        settings = make_settings()
        token = jwt.encode(
            {
                "sub": "1",
                "type": "refresh",
                "iss": settings.JWT_ISSUER,
                "aud": settings.JWT_AUDIENCE,
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        with pytest.raises(jwt.InvalidTokenError):
            TokenIssuer(settings).user_id_from_token(token)


class TestPasswordHasher:
    """bcrypt 해셔 테스트."""

    def test_hash_and_verify(self):
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash_password("Secret#123")
        assert hashed != "Secret#123"
        assert hashed.startswith("$2b$04$")
        assert hasher.verify_password("Secret#123", hashed)
        assert not hasher.verify_password("Secret#124", hashed)

    async def test_missing_user_never_matches(self):
        hasher = PasswordHasher(rounds=4)
        assert not await hasher.verify_password_async("budget-overflow-dummy-password", None)
        assert await hasher.verify_password_async("Secret#123", await hasher.hash_password_async("Secret#123"))


class TestRefreshTokenHashing:
    """리프레시 토큰 생성/해싱 테스트."""

    def test_raw_tokens_are_unique_and_hashed(self):
        first, second = generate_raw_refresh_token(), generate_raw_refresh_token()
        assert first != second
        assert len(first) >= 64
        assert hash_refresh_token(first) == hash_refresh_token(first)
        assert len(hash_refresh_token(first)) == 64
        assert hash_refresh_token(first) != first


class TestLogMasking:
    """Axiom 로그 마스킹 테스트."""

    def test_credentials_masked(self):
        body = {
            "email": "jane@example.com",
            "password": "Secret#123",
            "currentPassword": "Secret#123",
            "nested": {"refreshToken": "abc", "items": [{"accessToken": "x", "title": "Lunch"}]},
        }
        masked = mask_sensitive(body)
        assert masked["email"] == "jane@example.com"
        assert masked["password"] == "***"
        assert masked["currentPassword"] == "***"
        assert masked["nested"]["refreshToken"] == "***"
        assert masked["nested"]["items"] == [{"accessToken": "***", "title": "Lunch"}]
