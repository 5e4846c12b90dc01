"""리프레시 토큰 원본 생성 및 해싱 유틸리티.

Raw refresh token generation and hashing.
The raw value goes to the client; only its SHA-256 digest is stored.
"""

import hashlib
import secrets

# 48바이트 무작위 값 → base64url 약 64자 (48 random bytes → ~64 base64url chars)
REFRESH_TOKEN_BYTES: int = 48


def generate_raw_refresh_token() -> str:
    """암호학적으로 안전한 원본 리프레시 토큰을 생성합니다.

    Generate a cryptographically secure raw refresh token (never stored).
    """
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def hash_refresh_token(raw: str) -> str:
    """원본 토큰의 SHA-256 해시(hex)를 반환합니다.

    Return the SHA-256 hex digest used as the lookup key in refresh_tokens.
    """
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()
