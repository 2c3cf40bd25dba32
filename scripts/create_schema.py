import logging

from post_editor.db.base import Base, build_engine, database_url
from post_editor.models.post import Post  # noqa: F401  registers the table
from post_editor.settings import settings

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    url = database_url(
        settings.DB_DRIVER,
        settings.DB_USERNAME,
        settings.DB_PASSWORD,
        settings.DB_HOST,
        settings.DB_PORT,
        settings.DB_DATABASE,
    )
    engine = build_engine(url, query_timeout=settings.DB_QUERY_TIMEOUT)
    try:
        Base.metadata.create_all(engine)
        logger.info("Posts table is ready.")
    except Exception as e:
        logger.error(f"Schema creation failed: {e}", exc_info=True)
        raise
    finally:
        engine.dispose()
