"""사용자 레포지토리 — 자격 증명 저장소 쿼리.

User Repository — Credential store queries (lookup by normalized email,
creation, profile and password updates).
"""

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.models.user import User
from budget_overflow.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다 (대소문자 무시).

        Retrieve a user by email, case-insensitively.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 정규화된 이메일 (Normalized email)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        query: Select = select(User).where(func.lower(User.email) == email.lower())
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def email_exists(self, db: AsyncSession, email: str) -> bool:
        return await self.get_by_email(db, email) is not None

    async def update_password_hash(
        self,
        db: AsyncSession,
        user: User,
        password_hash: str,
    ) -> User:
        user.password_hash = password_hash
        await db.flush()
        return user


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
