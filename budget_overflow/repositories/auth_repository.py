"""인증 레포지토리 — 리프레시 토큰 저장소 CRUD.

Auth Repository — Refresh token store operations.
Tokens are always addressed by the SHA-256 hash of the raw secret; the raw
value never reaches the database.
"""

from datetime import datetime

from sqlalchemy import Select, delete, select
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.models.token import RefreshToken


class AuthRepository:
    """리프레시 토큰 관련 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling refresh token lifecycle queries.
    """

    async def create_refresh_token(
        self,
        db: AsyncSession,
        user_id: int,
        token_hash: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """새 리프레시 토큰을 생성합니다.

        Create a new refresh token record in the database.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유자 사용자 ID (Token owner user id)
            token_hash: 원본 토큰의 SHA-256 해시 (SHA-256 digest of the raw token)
            expires_at: 토큰 만료 일시 (Token expiration timestamp)

        Returns:
            RefreshToken: 생성된 리프레시 토큰 레코드 (Created refresh token record)
        """
        db_token: RefreshToken = RefreshToken(
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
        )
        db.add(db_token)
        await db.flush()
        await db.refresh(db_token)
        return db_token

    async def get_by_hash(
        self,
        db: AsyncSession,
        token_hash: str,
    ) -> RefreshToken | None:
        """해시로 토큰 레코드를 조회합니다.

        Retrieve a refresh token record by its hash.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            token_hash: 조회할 토큰 해시 (Token hash to look up)

        Returns:
            RefreshToken | None: 조회된 토큰 레코드 또는 None (Found token record or None)
        """
        query: Select = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_by_hash(
        self,
        db: AsyncSession,
        token_hash: str,
    ) -> bool:
        """해시로 토큰을 삭제하고 실제 삭제 여부를 반환합니다.

        Delete a refresh token by hash. Returns True only if this call removed
        the row, so two concurrent redemptions of one token cannot both win.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            token_hash: 삭제할 토큰 해시 (Token hash to delete)

        Returns:
            bool: 행이 삭제되었으면 True (True if a row was deleted)
        """
        result: CursorResult = await db.execute(
            delete(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        return result.rowcount > 0


# 싱글턴 인스턴스 — Singleton instance
auth_repository: AuthRepository = AuthRepository()
