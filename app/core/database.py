from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from app.core.config import settings

# Create async SQLAlchemy engine for the PostgreSQL warehouse
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_pre_ping=True,
    pool_recycle=300,
    pool_size=settings.DATABASE_POOL_SIZE,
    pool_timeout=settings.DATABASE_POOL_TIMEOUT,
)

# Create AsyncSessionLocal class
AsyncSessionLocal = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

# Create Base class for SQLAlchemy models
Base = declarative_base()

# Dependency to get database session
async def get_db():
    async with AsyncSessionLocal() as db:
        yield db
