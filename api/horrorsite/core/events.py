"""
Ciclo de vida de la aplicacion (lifespan de FastAPI).

Al arrancar deja en app.state los recursos compartidos por los endpoints
de sync: la base de datos y el cliente del feed de WordPress.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from loguru import logger

from horrorsite.core.config import settings
from horrorsite.infrastructure.database.session import Database
from horrorsite.infrastructure.external.wordpress.wordpress_client import WordPressClient


def configure_file_logging() -> None:
    """Agrega el sink de archivo con rotacion (API y CLI)."""
    logger.add(
        settings.LOG_FILE,
        rotation="500 MB",
        retention="10 days",
        level=settings.LOG_LEVEL
    )


async def _open_resources(app: FastAPI) -> None:
    logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")

    app.state.database = Database()
    await app.state.database.init_db()
    logger.info("Base de datos inicializada")

    app.state.wordpress_client = WordPressClient()
    logger.info(f"Feed de WordPress: {settings.WORDPRESS_API_URL}")


async def _close_resources(app: FastAPI) -> None:
    wordpress_client = getattr(app.state, "wordpress_client", None)
    if wordpress_client is not None:
        await wordpress_client.aclose()
        logger.info("Cliente de WordPress cerrado")

    database = getattr(app.state, "database", None)
    if database is not None:
        await database.close()
        logger.info("Conexiones de base de datos cerradas")


def _print_sync_urls() -> None:
    access_host = "localhost" if settings.HOST == "0.0.0.0" else settings.HOST
    base_url = f"http://{access_host}:{settings.PORT}"

    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")
    logger.opt(colors=True).info(f"<cyan>  Sync:    POST {base_url}/api/v1/sync/wordpress</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Estado:  GET  {base_url}/api/v1/sync/wordpress/status</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Docs:    {base_url}/docs</cyan>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Abre la base y el cliente del feed antes de servir requests y los
    cierra al apagar, aun si el arranque fallo a mitad de camino.
    """
    configure_file_logging()
    try:
        await _open_resources(app)
    except Exception:
        logger.exception("Error durante el arranque")
        await _close_resources(app)
        raise

    logger.success("Aplicacion iniciada correctamente")
    _print_sync_urls()
    try:
        yield
    finally:
        logger.info("Cerrando aplicacion...")
        await _close_resources(app)
        logger.success("Aplicacion cerrada correctamente")
