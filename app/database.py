"""
🔌 Database Connection Setup - PostgreSQL (SQLAlchemy async)

Configuración centralizada para conectar a la base relacional
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from app.core.config import get_settings
from app.models.tables import metadata
from app.repositories.contribution_repository import ContributionRepository, ContributionStore

logger = logging.getLogger(__name__)


class Database:
    """Singleton para el engine de SQLAlchemy"""

    engine: Optional[AsyncEngine] = None

    @classmethod
    async def connect(cls, url: Optional[str] = None):
        """
        Crea el engine a partir de DATABASE_URL.

        Sin URL no se falla: la app arranca y el leaderboard responde
        503 db_not_configured hasta que se configure.
        """
        if cls.engine is not None:
            return

        settings = get_settings()
        database_url = url or settings.database_url

        if not database_url:
            logger.warning("DATABASE_URL not set, leaderboard will report db_not_configured")
            return

        engine_kwargs = {"echo": settings.db_echo, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs["pool_size"] = settings.db_pool_size
            engine_kwargs["max_overflow"] = settings.db_max_overflow

        cls.engine = create_async_engine(database_url, **engine_kwargs)
        logger.info("✅ Database engine created for %s", cls.engine.url.render_as_string(hide_password=True))

    @classmethod
    async def disconnect(cls):
        """Cierra el pool de conexiones"""
        if cls.engine is not None:
            await cls.engine.dispose()
            cls.engine = None
            logger.info("❌ Disconnected from database")

    @classmethod
    def get_engine(cls) -> Optional[AsyncEngine]:
        """Retorna el engine, o None si la base no está configurada"""
        return cls.engine


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_contribution_store() -> Optional[ContributionStore]:
    """
    FastAPI dependency para inyectar el store de contribuciones

    Retorna None cuando no hay base configurada; el ranker lo convierte
    en DataSourceUnavailable.
    """
    engine = Database.get_engine()
    if engine is None:
        return None
    return ContributionRepository(engine)


# ============================================
# 🏗️ CREAR TABLAS (run once al deployment)
# ============================================

async def create_tables(engine: Optional[AsyncEngine] = None):
    """
    Crea las tablas e índices que lee el leaderboard si no existen

    Útil para entornos locales y tests; en producción el esquema lo
    gestionan las migraciones del backend principal.
    """
    engine = engine or Database.get_engine()
    if engine is None:
        raise RuntimeError("Database not connected. Call Database.connect() first.")

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    logger.info("✅ Tables created successfully")
