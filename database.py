import logging
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from typing import Generator, Optional
from fastapi import Request

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


class Database:
    """
    Explicit handle around the SQLAlchemy engine and session factory.

    Built once in the application lifespan and disposed at shutdown.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_recycle: int = 300,
        echo: bool = False,
    ):
        self.url = url
        self.engine = create_engine(url, echo=echo, **self._engine_options(url, pool_size, max_overflow, pool_recycle))
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("✅ SQLAlchemy engine initialized")

    @staticmethod
    def _engine_options(url: str, pool_size: int, max_overflow: int, pool_recycle: int) -> dict:
        if url.startswith("sqlite"):
            options = {"connect_args": {"check_same_thread": False}}
            # One shared connection, otherwise every checkout gets its own empty in-memory database
            if url in ("sqlite://", "sqlite:///:memory:"):
                options["poolclass"] = StaticPool
            return options
        return {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_pre_ping": True,
            "pool_recycle": pool_recycle,
        }

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE,
            echo=settings.SQL_ECHO,
        )

    def init_db(self):
        """
        Initialize database tables (if needed)
        This will create all tables defined in your models
        """
        try:
            # Import all models here to ensure they are registered with Base
            import models  # noqa: F401

            Base.metadata.create_all(bind=self.engine)
            logger.info("✅ Database tables initialized")
        except Exception as e:
            logger.error(f"❌ Failed to initialize database tables: {str(e)}")
            raise

    def test_connection(self) -> bool:
        """
        Test database connectivity

        Returns:
            bool: True if connection successful, False otherwise
        """
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                logger.info("✅ Database connection test successful")
                return True
        except Exception as e:
            logger.error(f"❌ Database connection test failed: {str(e)}")
            return False

    def dispose(self):
        self.engine.dispose()
        logger.info("🛑 Database engine disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database dependency for FastAPI dependency injection.
    Creates a new session from the application's Database handle for each request and closes it when done.

    Yields:
        Session: SQLAlchemy database session
    """
    database: Optional[Database] = request.app.state.database
    db = database.SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database session error: {str(e)}")
        db.rollback()
        raise
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
