"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing and verification utility module.
Uses bcrypt directly for secure password storage.
Passwords are never stored in plain text — always hashed with bcrypt.

bcrypt는 CPU를 점유하므로 비동기 메서드는 스레드풀에서 실행됩니다.
(bcrypt is CPU-bound, so the async methods run it in the threadpool.)
"""

import bcrypt
from starlette.concurrency import run_in_threadpool

# bcrypt는 72바이트까지만 사용 — bcrypt only consumes the first 72 bytes
_BCRYPT_MAX_BYTES: int = 72

# 존재하지 않는 사용자 로그인 시 비교 대상이 되는 고정 비밀번호
# Fixed secret whose hash stands in for a missing user's hash on login
_DUMMY_SECRET: bytes = b"budget-overflow-dummy-password"


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt 해셔 — 비용 계수와 더미 해시를 보관.

    bcrypt hasher holding the configured cost factor and a dummy hash
    precomputed at the same cost, so a login for an unknown email performs
    the same single comparison as a login with a wrong password.

    Attributes:
        rounds: bcrypt 비용 계수 (bcrypt cost factor)
        dummy_hash: 고정 더미 해시 (Fixed precomputed dummy hash)
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds: int = rounds
        self.dummy_hash: str = self.hash_password(_DUMMY_SECRET.decode("utf-8"))

    def hash_password(self, password: str) -> str:
        """평문 비밀번호를 bcrypt 해시로 변환합니다.

        Hash a plain text password using bcrypt.
        The resulting hash includes a random salt, making each hash unique
        even for identical passwords.

        Args:
            password: 평문 비밀번호 (Plain text password to hash)

        Returns:
            str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)

        Example:
            hashed = hasher.hash_password("my-secret-password")
            # "$2b$10$LJ3m4ys3..."
        """
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """평문 비밀번호와 bcrypt 해시를 비교 검증합니다.

        Verify a plain text password against a bcrypt hash.
        Uses constant-time comparison to prevent timing attacks.

        Args:
            plain_password: 검증할 평문 비밀번호 (Plain text password to verify)
            hashed_password: 저장된 bcrypt 해시 (Stored bcrypt hash to compare against)

        Returns:
            bool: 일치하면 True, 불일치하면 False (True if password matches hash)
        """
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))

    async def hash_password_async(self, password: str) -> str:
        return await run_in_threadpool(self.hash_password, password)

    async def verify_password_async(self, plain_password: str, hashed_password: str | None) -> bool:
        """사용자가 없으면 더미 해시와 비교한 뒤 False를 반환합니다.

        Verify against the stored hash, or against the dummy hash when the
        user does not exist. Exactly one bcrypt comparison happens either way.
        """
        target: str = hashed_password if hashed_password is not None else self.dummy_hash
        matched: bool = await run_in_threadpool(self.verify_password, plain_password, target)
        return matched and hashed_password is not None
