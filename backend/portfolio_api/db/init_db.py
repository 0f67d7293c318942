"""
Database initialization and bootstrapping.
Creates tables and seeds the default administrator with sample projects.

Run with: python -m portfolio_api.db.init_db [--seed]
"""

import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from portfolio_api.core.config import settings
from portfolio_api.core.logging import get_logger, setup_logging
from portfolio_api.core.security import hash_password
from portfolio_api.db.base import Base
from portfolio_api.db.repositories.account_repository import AccountRepository
from portfolio_api.db.repositories.project_repository import ProjectRepository
from portfolio_api.db.session import Database
from portfolio_api.models import AccountRole

logger = get_logger(__name__)

SAMPLE_VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

SAMPLE_PROJECTS = [
    {
        "title": "E-commerce Platform",
        "description": "Full e-commerce platform with shopping cart, payments and inventory management.",
        "video_title": "E-commerce Platform demo",
        "repository_url": "https://github.com/portfolio/ecommerce-platform",
        "technologies": ["React", "Node.js", "PostgreSQL", "Stripe"],
    },
    {
        "title": "Data Analytics Dashboard",
        "description": "Interactive analytics dashboard with real-time charts and custom reports.",
        "video_title": "Analytics Dashboard demo",
        "repository_url": "https://github.com/portfolio/analytics-dashboard",
        "technologies": ["Vue.js", "D3.js", "Python", "FastAPI"],
    },
    {
        "title": "Task Management System",
        "description": "Task management system with real-time collaboration and project tracking.",
        "video_title": "Task Management demo",
        "repository_url": "https://github.com/portfolio/task-management",
        "technologies": ["Angular", "NestJS", "MongoDB", "Socket.io"],
    },
]


async def create_tables(database: Database) -> None:
    """Create all database tables that do not exist yet."""
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")


async def seed_initial_data(session: AsyncSession) -> bool:
    """
    Create the default administrator and three featured sample projects.

    Returns:
        False if an administrator already exists and nothing was seeded
    """
    account_repo = AccountRepository(session)
    if await account_repo.get_first_admin() is not None:
        logger.info("Administrator already exists, seeding skipped")
        return False

    password_hash = await run_in_threadpool(hash_password, settings.DEFAULT_ADMIN_PASSWORD)
    admin = await account_repo.create(
        name=settings.DEFAULT_ADMIN_NAME,
        email=settings.DEFAULT_ADMIN_EMAIL.lower(),
        password_hash=password_hash,
        role=AccountRole.ADMIN,
        is_active=True,
    )

    project_repo = ProjectRepository(session)
    for order, sample in enumerate(SAMPLE_PROJECTS, start=1):
        await project_repo.create(
            video_url=SAMPLE_VIDEO_URL,
            is_featured=True,
            display_order=order,
            author_id=admin.id,
            **sample,
        )

    await session.commit()
    logger.info(
        "Initial data seeded",
        extra={"admin_email": admin.email, "projects": len(SAMPLE_PROJECTS)},
    )
    return True


async def init_db(seed: bool = False) -> None:
    database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    await database.connect()
    try:
        await create_tables(database)
        if seed:
            async with database.session() as session:
                await seed_initial_data(session)
    finally:
        await database.disconnect()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the portfolio database schema.")
    parser.add_argument(
        "--seed",
        action="store_true",
        help="also create the default administrator and sample projects",
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(init_db(seed=args.seed))


if __name__ == "__main__":
    main()
