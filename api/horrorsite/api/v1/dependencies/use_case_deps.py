"""
Dependencias para inyeccion de casos de uso.

La base de datos y el cliente de WordPress se construyen una vez en el
startup y viven en app.state.
"""
from fastapi import Depends, Request

from horrorsite.application.use_cases.wordpress_sync_use_cases import SyncOrchestrator
from horrorsite.infrastructure.database.session import Database
from horrorsite.infrastructure.external.wordpress.wordpress_client import WordPressClient
from horrorsite.infrastructure.repositories.content_storage import ContentStorage


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_wordpress_client(request: Request) -> WordPressClient:
    return request.app.state.wordpress_client


def get_sync_orchestrator(
    database: Database = Depends(get_database),
    wordpress_client: WordPressClient = Depends(get_wordpress_client),
) -> SyncOrchestrator:
    """
    Dependencia para obtener el orquestador del sync de WordPress.

    Returns:
        SyncOrchestrator: Orquestador con almacenamiento y feed inyectados
    """
    return SyncOrchestrator(wordpress_client, ContentStorage(database.session_factory))
