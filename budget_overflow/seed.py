"""초기 데이터 시드 스크립트 — 테이블 생성 및 전역 카테고리 등록.

Seed script — Creates tables from ORM metadata and inserts the global
categories shared by every user. Safe to run repeatedly.

Usage:
    python -m budget_overflow.seed
"""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import budget_overflow.models  # noqa: F401  모든 모델 등록 (Registers every model on the metadata)
from budget_overflow.config import Settings, get_settings
from budget_overflow.database import Base, build_engine, build_session_factory
from budget_overflow.models.category import Category
from budget_overflow.utils.logger import get_logger, setup_logging

logger = get_logger("seed")

GLOBAL_CATEGORIES: tuple[str, ...] = (
    # 수입 — Income
    "Salary",
    "Business",
    "Investments",
    "Gifts",
    "Other Income",
    # 지출 — Expense
    "Groceries",
    "Utilities",
    "Rent",
    "Transportation",
    "Entertainment",
    "Dining Out",
    "Healthcare",
    "Insurance",
    "Education",
    "Travel",
    "Personal Care",
    "Miscellaneous",
)


async def create_tables(engine: AsyncEngine) -> None:
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_global_categories(db: AsyncSession) -> int:
    """없는 전역 카테고리만 추가합니다.

    Insert the global categories that do not exist yet.

    Returns:
        int: 새로 추가된 카테고리 수 (Number of categories inserted)
    """
    result = await db.execute(select(Category.name).where(Category.user_id.is_(None)))
    existing: set[str] = set(result.scalars().all())
    missing: list[str] = [name for name in GLOBAL_CATEGORIES if name not in existing]
    db.add_all(Category(user_id=None, name=name) for name in missing)
    await db.flush()
    return len(missing)


async def seed(settings: Settings | None = None) -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database. Idempotent: 이미 존재하는 카테고리는 건너뜁니다
    (existing categories are skipped).
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    engine: AsyncEngine = build_engine(settings)
    try:
        await create_tables(engine)
        async with build_session_factory(engine)() as db:
            inserted: int = await seed_global_categories(db)
            await db.commit()
        logger.info("Seed complete: %d global categories inserted", inserted, extra={"event": "seed"})
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
