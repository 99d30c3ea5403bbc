"""
Reconciliacion de un post del feed contra los posts locales.

Decide insert vs update por slug y arma los campos a persistir.

Politica de metadata en updates: merge superficial. Las llaves nuevas se
escriben (incluida lastUpdated); las llaves existentes que no vienen en la
bolsa nueva se conservan. Procesos externos pueden escribir en metadata entre
corridas y el sync nunca debe borrarlo.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from loguru import logger

from horrorsite.application.interfaces.sync_storage import AuthorRef, SyncStorage
from horrorsite.application.services.content_transformer import TransformedFields
from horrorsite.domain.entities.sync_run import SyncRun
from horrorsite.infrastructure.external.wordpress.types import WordPressRecord
from horrorsite.shared.utils.datetime_utils import DateTimeUtils

IMPORT_SOURCE_BATCH = "wordpress-api"
IMPORT_SOURCE_SINGLE = "wordpress-api-single"

ACTION_CREATED = "created"
ACTION_UPDATED = "updated"


@dataclass(frozen=True)
class ReconcileOutcome:
    action: str  # "created" | "updated"
    post_id: int
    slug: str
    title: str


def build_metadata(
    record: WordPressRecord,
    canonical: TransformedFields,
    categories: List[str],
    run: SyncRun,
    import_source: str,
) -> Dict[str, Any]:
    """Bolsa de procedencia que escribe cada corrida."""
    return {
        "wordpressId": record.wordpress_id,
        "importSource": import_source,
        "importDate": DateTimeUtils.to_iso_string(DateTimeUtils.now_utc()),
        "syncId": run.sync_id,
        "originalWordCount": canonical.word_count,
        "categories": list(categories),
        "originalDate": record.date_raw,
    }


def merge_metadata(existing: Optional[Dict[str, Any]], new: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **(existing or {}),
        **new,
        "lastUpdated": DateTimeUtils.to_iso_string(DateTimeUtils.now_utc()),
    }


class RecordReconciler:
    """
    Args:
        storage: Almacenamiento inyectado
    """

    def __init__(self, storage: SyncStorage):
        self._storage = storage

    async def reconcile(
        self,
        record: WordPressRecord,
        canonical: TransformedFields,
        categories: List[str],
        run: SyncRun,
        author: AuthorRef,
        *,
        theme: str,
        import_source: str = IMPORT_SOURCE_BATCH,
    ) -> ReconcileOutcome:
        """
        Args:
            theme: Tema ya elegido por CategoryResolver.theme_for

        Raises:
            PersistenceError: si el almacenamiento rechaza la operacion
        """
        slug = record.slug
        title = canonical.title or slug
        metadata = build_metadata(record, canonical, categories, run, import_source)

        existing = await self._storage.find_by_slug(slug)

        if existing is None:
            post = await self._storage.insert({
                "title": title,
                "content": canonical.content,
                "excerpt": canonical.excerpt,
                "slug": slug,
                "author_id": author.id,
                "is_secret": False,
                "is_admin_post": False,
                "mature_content": False,
                "reading_time_minutes": canonical.reading_time_minutes,
                "theme_category": theme,
                "metadata": metadata,
                "created_at": record.published_at or DateTimeUtils.now_utc(),
            })
            logger.info(f'Post creado: "{title}" (ID: {post.id})')
            return ReconcileOutcome(ACTION_CREATED, post.id, slug, title)

        post = await self._storage.update(existing.id, {
            "title": title,
            "content": canonical.content,
            "excerpt": canonical.excerpt,
            "reading_time_minutes": canonical.reading_time_minutes,
            "theme_category": theme,
            "metadata": merge_metadata(existing.metadata, metadata),
            # Los posts de WordPress nunca son posts de admin
            "is_admin_post": False,
        })
        logger.info(f'Post actualizado: "{title}" (ID: {post.id})')
        return ReconcileOutcome(ACTION_UPDATED, post.id, slug, title)
