import os

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

import config  # noqa: F401  (loads .env before the variables below are read)

# Lead store connection, built from environment variables
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")
DB_PORT = os.getenv("POSTGRES_PORT", "5432")
DB_USER = os.getenv("POSTGRES_USER", "agency")
DB_PASS = os.getenv("POSTGRES_PASSWORD", "agency")
DB_NAME = os.getenv("POSTGRES_DB", "agency_leads")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

engine = create_async_engine(DATABASE_URL, echo=DB_ECHO, pool_pre_ping=True)
async_session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
