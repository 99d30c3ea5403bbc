"""
Casos de uso para sincronización de contenido desde WordPress.

Flujo de una corrida:
    Inicio -> Autor del sistema -> Categorias -> Pagina(n) -> Registros(n)
           -> (¿hay mas? Pagina(n+1) : Finalizar)

- Autor y categorias se resuelven una sola vez, antes de la primera pagina.
- Los registros se procesan en secuencia; un registro fallido se cuenta y
  se sigue con el siguiente.
- Un fallo al traer una pagina es fatal: la corrida se abandona sin resumen.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Optional, Protocol, TypeVar

from loguru import logger

from horrorsite.application.interfaces.sync_storage import AuthorRef, SyncStorage
from horrorsite.application.services.category_resolver import CategoryResolver
from horrorsite.application.services.content_transformer import ContentTransformer
from horrorsite.application.services.identity_provisioner import IdentityProvisioner
from horrorsite.application.services.record_reconciler import (
    IMPORT_SOURCE_BATCH,
    IMPORT_SOURCE_SINGLE,
    RecordReconciler,
    ReconcileOutcome,
)
from horrorsite.core.config import settings
from horrorsite.domain.entities.sync_run import SyncRun
from horrorsite.infrastructure.external.wordpress.types import WordPressCategory, WordPressRecord
from horrorsite.shared.exceptions.sync import PersistenceError, SyncTimeoutError
from horrorsite.shared.utils.datetime_utils import DateTimeUtils

T = TypeVar("T")


class FeedSource(Protocol):
    """Lo que el orquestador necesita del feed (WordPressClient o un fake)."""

    async def fetch_posts_page(self, page: int, per_page: int) -> List[Dict[str, Any]]:
        ...

    async def fetch_post(self, post_id: int) -> Dict[str, Any]:
        ...

    async def fetch_categories_page(self, page: int, per_page: int) -> List[WordPressCategory]:
        ...


@dataclass
class SyncDependencies:
    """Colaboradores construidos una vez por el entry point (API o CLI)."""

    feed: FeedSource
    storage: SyncStorage
    transformer: ContentTransformer = field(default_factory=ContentTransformer)


def _raw_title(raw: Any) -> str:
    """Titulo crudo de un post del feed, aun si el post viene mal formado."""
    if isinstance(raw, dict):
        title = raw.get("title")
        if isinstance(title, dict):
            title = title.get("rendered")
        if title:
            return str(title)
        if raw.get("id") is not None:
            return f"WordPress #{raw['id']}"
    return "<sin titulo>"


class SyncOrchestrator:
    """
    Orquestador de la sincronizacion WordPress -> posts.

    Args:
        feed: Fuente de posts y categorias
        storage: Almacenamiento inyectado
        transformer: Transformador de markup
        per_page: Tamaño de pagina del listado de posts
    """

    def __init__(
        self,
        feed: FeedSource,
        storage: SyncStorage,
        *,
        transformer: Optional[ContentTransformer] = None,
        per_page: Optional[int] = None,
        author_email: Optional[str] = None,
        default_theme: Optional[str] = None,
    ):
        self.feed = feed
        self.storage = storage
        self.transformer = transformer or ContentTransformer()
        self.per_page = per_page or settings.WORDPRESS_PER_PAGE
        self.author_email = author_email or settings.SYNC_AUTHOR_EMAIL
        self.default_theme = default_theme or settings.SYNC_DEFAULT_THEME

        self.identity_provisioner = IdentityProvisioner(storage)
        self.reconciler = RecordReconciler(storage)

    def _new_category_resolver(self) -> CategoryResolver:
        """El mapa de categorias se arma de nuevo en cada corrida."""
        return CategoryResolver(self.feed, default_theme=self.default_theme)

    async def run(self) -> Dict[str, Any]:
        """
        Ejecuta una corrida completa sobre todas las paginas del feed.

        Returns:
            Dict: resumen de la corrida (SyncRun.summary)

        Raises:
            IdentityProvisionError: no hay autor al cual atribuir los posts
            FetchError: una pagina no se pudo traer (tras los reintentos)
        """
        run = SyncRun()
        logger.info(f"Iniciando importacion de WordPress (Sync #{run.sync_id})")

        author = await self.identity_provisioner.get_or_create_system_author(self.author_email)
        resolver = self._new_category_resolver()
        await resolver.resolve()

        page = 1
        while True:
            logger.info(f"Obteniendo posts de WordPress - pagina {page}, per_page {self.per_page}")
            posts = await self.feed.fetch_posts_page(page, self.per_page)

            if not posts:
                break

            logger.info(f"{len(posts)} posts recibidos en la pagina {page}")
            run.total_processed += len(posts)

            for raw in posts:
                await self._process_record(raw, run, author, resolver)

            if len(posts) < self.per_page:
                break
            page += 1

        run.finalize()
        self._log_report(run)
        return run.summary()

    async def _process_record(
        self,
        raw: Any,
        run: SyncRun,
        author: AuthorRef,
        resolver: CategoryResolver,
    ) -> Optional[ReconcileOutcome]:
        """Transforma y reconcilia un post; cualquier fallo queda en el SyncRun."""
        try:
            outcome = await self._sync_record(raw, run, author, resolver, IMPORT_SOURCE_BATCH)
        except Exception as e:
            title = _raw_title(raw)
            wordpress_id = raw.get("id") if isinstance(raw, dict) else None
            logger.error(f'Error procesando post "{title}": {e}')
            run.record_failure(wordpress_id, title, str(e))
            return None

        if outcome.action == "created":
            run.record_created()
        else:
            run.record_updated()
        return outcome

    async def _sync_record(
        self,
        raw: Any,
        run: SyncRun,
        author: AuthorRef,
        resolver: CategoryResolver,
        import_source: str,
    ) -> ReconcileOutcome:
        record = WordPressRecord.from_api(raw)
        canonical = self.transformer.transform_record(
            record.title_markup,
            record.content_markup,
            record.excerpt_markup,
        )
        categories = resolver.lookup_names(record.category_ids)
        return await self.reconciler.reconcile(
            record,
            canonical,
            categories,
            run,
            author,
            theme=resolver.theme_for(categories),
            import_source=import_source,
        )

    async def sync_single_post(self, post_id: int) -> Dict[str, Any]:
        """
        Sincroniza un solo post por su ID de WordPress.

        A diferencia de la corrida completa, los errores se propagan.

        Returns:
            Dict: {"id", "title", "action"}
        """
        logger.info(f"Sincronizando post individual de WordPress: {post_id}")
        raw = await self.feed.fetch_post(post_id)

        author = await self.identity_provisioner.get_or_create_system_author(self.author_email)
        resolver = self._new_category_resolver()
        await resolver.resolve()

        outcome = await self._sync_record(raw, SyncRun(), author, resolver, IMPORT_SOURCE_SINGLE)
        logger.success(f'Post {post_id} sincronizado ({outcome.action}): "{outcome.title}"')
        return {"id": outcome.post_id, "title": outcome.title, "action": outcome.action}

    async def get_status(self) -> Dict[str, Any]:
        """Contadores de posts totales e importados."""
        try:
            total_posts = await self.storage.count_posts()
            wordpress_posts = await self.storage.count_imported_posts()
        except PersistenceError as e:
            logger.error(f"Error consultando estado del sync: {e.message}")
            return {"status": "error", "error": e.message}

        return {
            "total_posts": total_posts,
            "wordpress_posts": wordpress_posts,
            "last_checked": DateTimeUtils.to_iso_string(DateTimeUtils.now_utc()),
            "status": "operational",
        }

    @staticmethod
    def _log_report(run: SyncRun) -> None:
        summary = run.summary()
        logger.info("=== Resumen de importacion WordPress ===")
        logger.info(f"Tiempo: {summary['start_time']} a {summary['end_time']}")
        logger.info(f"Posts procesados: {summary['total_processed']}")
        logger.info(f"Posts creados: {summary['created']}")
        logger.info(f"Posts actualizados: {summary['updated']}")
        logger.info(f"Posts fallidos: {summary['failed']}")
        for failure in summary["failed_records"]:
            logger.warning(f"  - [{failure['wordpress_id']}] {failure['title']}: {failure['error']}")
        logger.info(f"Duracion: {summary['duration_seconds']} segundos")
        logger.info("========================================")
        logger.success(f"Sync #{run.sync_id} completado")


async def _with_timeout(operation: Awaitable[T], timeout_s: Optional[float]) -> T:
    if timeout_s is None:
        return await operation
    try:
        return await asyncio.wait_for(operation, timeout=timeout_s)
    except asyncio.TimeoutError as e:
        logger.error(f"Sync abortado: se excedio el limite de {timeout_s}s")
        raise SyncTimeoutError(timeout_s) from e


async def run_sync(deps: SyncDependencies, timeout_s: Optional[float] = None) -> Dict[str, Any]:
    """
    Corrida completa como funcion pura: recibe dependencias, devuelve el resumen.

    Los errores fatales se propagan; mapearlos a codigo de salida es
    responsabilidad del entry point.
    """
    orchestrator = SyncOrchestrator(deps.feed, deps.storage, transformer=deps.transformer)
    return await _with_timeout(orchestrator.run(), timeout_s)


async def run_single_post_sync(
    deps: SyncDependencies,
    post_id: int,
    timeout_s: Optional[float] = None,
) -> Dict[str, Any]:
    orchestrator = SyncOrchestrator(deps.feed, deps.storage, transformer=deps.transformer)
    return await _with_timeout(orchestrator.sync_single_post(post_id), timeout_s)
