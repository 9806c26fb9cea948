import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.fsm.storage.memory import MemoryStorage
from sqlalchemy import select

import config
from bot.db_config import engine, async_session
from bot.handlers import start, lead_viewer, filters, generate
from bot.middleware.db_session import DbSessionMiddleware
from bot.models.base import Base
from bot.models.lead import LeadRecord  # noqa: F401
from bot.models.niche import Niche
from bot.models.usage import NicheUsage, WeeklyUsage  # noqa: F401


async def create_tables() -> None:
    """Creates all tables in the database if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_niches() -> int:
    """Fills the niche catalog on first start. Returns how many were added."""
    async with async_session() as session:
        existing = (await session.execute(select(Niche))).scalars().all()
        if existing:
            return 0
        added = 0
        for category, names in config.DEFAULT_NICHES.items():
            for name in names:
                session.add(Niche(name=name, category=category))
                added += 1
        await session.commit()
    logging.info(f"[Startup] Seeded {added} niches")
    return added


async def main(bot_token: str) -> None:
    """Bot entry point."""
    await create_tables()
    await seed_niches()

    bot = Bot(token=bot_token, default=DefaultBotProperties(parse_mode="HTML"))
    dp = Dispatcher(storage=MemoryStorage())

    dp.update.middleware(DbSessionMiddleware(session_pool=async_session))

    dp.include_router(start.router)
    dp.include_router(lead_viewer.router)
    dp.include_router(filters.router)
    dp.include_router(generate.router)

    logging.info("Starting bot...")
    await bot.delete_webhook(drop_pending_updates=True)
    await dp.start_polling(bot)
