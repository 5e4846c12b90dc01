"""JWT 액세스 토큰 생성 및 검증 유틸리티 모듈.

JWT access token creation and verification utility module.
Access tokens are stateless: validation is signature + expiry + issuer +
audience only, with no database lookup and no revocation list.

JWT Payload Structure:
    {
        "sub": "42",                       # 사용자 ID 문자열 (User id as string)
        "userId": 42,                      # 사용자 ID 정수 (User id as int)
        "type": "access",                  # 토큰 유형 (Token type discriminator)
        "iss": "budget-overflow.api",      # 발급자 (Issuer)
        "aud": "budget-overflow.client",   # 대상 (Audience)
        "iat": 1234567000,                 # 발급 시간 (Issued at)
        "exp": 1234567890                  # 만료 시간 UNIX timestamp (Expiration)
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from budget_overflow.config import Settings


class TokenIssuer:
    """액세스 토큰 발급/검증기.

    Access token issuer bound to one settings object.

    Attributes:
        settings: 서명 키, 알고리즘, 만료 시간 설정 (Signing key, algorithm and TTL settings)
    """

    def __init__(self, settings: Settings) -> None:
        self.settings: Settings = settings

    def create_access_token(self, user_id: int) -> str:
        """JWT 액세스 토큰을 생성합니다.

        Generate a signed JWT access token for the given user.
        Token expires after JWT_ACCESS_TOKEN_EXPIRE_MINUTES (default: 15 min).

        Args:
            user_id: 토큰 소유자 ID (Token owner user id)

        Returns:
            str: 인코딩된 JWT 문자열 (Encoded JWT token string)
        """
        now: datetime = datetime.now(timezone.utc)
        # 만료 시간 설정 — 현재 UTC 시간 + 설정된 분 수 (Set expiration from current UTC + configured minutes)
        expire: datetime = now + timedelta(minutes=self.settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "userId": user_id,
            "type": "access",
            "iss": self.settings.JWT_ISSUER,
            "aud": self.settings.JWT_AUDIENCE,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self.settings.JWT_SECRET_KEY, algorithm=self.settings.JWT_ALGORITHM)

    def decode_token(self, token: str) -> dict[str, Any]:
        """JWT 토큰을 디코딩하고 검증합니다.

        Decode and verify a JWT token string.
        Raises jwt.ExpiredSignatureError if the token has expired,
        and jwt.InvalidTokenError for any other validation failure
        (bad signature, wrong issuer or audience, missing claims).

        Args:
            token: JWT 토큰 문자열 (Encoded JWT token string)

        Returns:
            dict[str, Any]: 디코딩된 페이로드 딕셔너리 (Decoded payload dictionary)

        Raises:
            jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
            jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
        """
        return jwt.decode(
            token,
            self.settings.JWT_SECRET_KEY,
            algorithms=[self.settings.JWT_ALGORITHM],
            audience=self.settings.JWT_AUDIENCE,
            issuer=self.settings.JWT_ISSUER,
            options={"require": ["exp", "sub", "iss", "aud"]},
        )

    def user_id_from_token(self, token: str) -> int:
        """토큰을 검증하고 사용자 ID를 반환합니다.

        Verify the token and return its user id.

        Raises:
            jwt.InvalidTokenError: 검증 실패 또는 잘못된 토큰 유형 (Verification failure or wrong token type)
        """
        payload: dict[str, Any] = self.decode_token(token)
        if payload.get("type") != "access":
            raise jwt.InvalidTokenError("Invalid token type")
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise jwt.InvalidTokenError("Invalid token subject") from exc
