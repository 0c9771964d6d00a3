from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from product_catalog.config import DATABASE_URL
from product_catalog.data.models import Base
from product_catalog.utils.logger import get_current_logger


class PostgresConnection:
    """
    Async SQLAlchemy connection manager for the product store.

    Provides async connection pooling and the session factory handed to
    ``ProductRepository``.
    """

    def __init__(self, url: str = DATABASE_URL, **engine_kwargs):
        """
        Initialize the async engine.

        Args:
            url: SQLAlchemy database URL (``postgresql+asyncpg://...`` in production)
            **engine_kwargs: Extra ``create_async_engine`` options
        """
        logger = get_current_logger()
        if url.startswith("postgresql"):
            engine_kwargs.setdefault("pool_size", 20)
            engine_kwargs.setdefault("max_overflow", 10)

        self.engine = create_async_engine(
            url,
            echo=False,  # Set to True for SQL query logging
            **engine_kwargs,
        )
        self.AsyncSessionLocal = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )
        logger.info(f"✅ Async engine initialized: {self.engine.url.render_as_string(hide_password=True)}")

    def get_session(self) -> AsyncSession:
        """
        Get a new async database session.

        Returns:
            SQLAlchemy AsyncSession object
        """
        return self.AsyncSessionLocal()

    async def create_tables(self):
        """Create missing tables. Does not alter existing ones."""
        logger = get_current_logger()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✅ Product store tables ensured")

    async def health_check(self) -> bool:
        """
        Check database connection health.

        Returns:
            True if a trivial query succeeds, False otherwise
        """
        logger = get_current_logger()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def close(self):
        """Close database engine and cleanup resources."""
        logger = get_current_logger()
        await self.engine.dispose()
        logger.info("✅ Async engine disposed")
