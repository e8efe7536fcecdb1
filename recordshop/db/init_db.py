# recordshop/db/init_db.py
import logging

from sqlalchemy import func
from sqlalchemy.future import select

from recordshop.db.database import Base, Database
from recordshop.db.models import User, Genre, Record, Cart, CartItem  # noqa: F401

logger = logging.getLogger(__name__)

DEFAULT_GENRES = [
    "Rock",
    "Pop",
    "Jazz",
    "Hip-Hop",
    "Electronic",
    "Classical",
    "Country",
    "R&B",
    "Metal",
    "Folk",
]


async def init_db(database: Database, seed_genres: bool = True):
    async with database.engine.begin() as conn:
        # Создание всех таблиц
        await conn.run_sync(Base.metadata.create_all)

    if not seed_genres:
        return

    async with database.session() as session:
        count = await session.execute(select(func.count()).select_from(Genre))
        if count.scalar_one() == 0:
            session.add_all([Genre(name=name) for name in DEFAULT_GENRES])
            await session.commit()
            logger.info("Seeded %d genres", len(DEFAULT_GENRES))
