"""
Almacenamiento del pipeline de sync sobre SQLAlchemy async.

Cada operacion abre su propia sesion y transaccion: un insert/update
rechazado hace rollback solo de ese registro y no contamina al siguiente.
"""
from typing import Any, Callable, Dict, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from horrorsite.application.interfaces.sync_storage import AuthorRef, PostRecord
from horrorsite.infrastructure.database.models import PostModel, UserModel
from horrorsite.infrastructure.repositories.post_repository import PostRepository
from horrorsite.infrastructure.repositories.user_repository import UserRepository
from horrorsite.shared.exceptions.sync import PersistenceError

# Valores de metadata.importSource que marcan un post como importado
IMPORT_SOURCES = ("wordpress-api", "wordpress-api-single")


def _to_post_record(post: PostModel) -> PostRecord:
    return PostRecord(
        id=post.id,
        slug=post.slug,
        title=post.title,
        metadata=dict(post.post_meta or {}),
    )


def _to_author_ref(user: UserModel) -> AuthorRef:
    return AuthorRef(id=user.id, email=user.email, username=user.username)


class ContentStorage:
    """
    Implementacion de SyncStorage.

    Args:
        session_factory: async_sessionmaker construido por el entry point
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def find_by_slug(self, slug: str) -> Optional[PostRecord]:
        try:
            async with self._session_factory() as session:
                post = await PostRepository(session).get_by_slug(slug)
                return _to_post_record(post) if post else None
        except SQLAlchemyError as e:
            raise PersistenceError("find_by_slug", e) from e

    async def insert(self, fields: Dict[str, Any]) -> PostRecord:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    post = await PostRepository(session).create(fields)
                    record = _to_post_record(post)
        except SQLAlchemyError as e:
            logger.warning(f"Insert rechazado para slug '{fields.get('slug')}': {e}")
            raise PersistenceError("insert", e) from e
        return record

    async def update(self, post_id: int, fields: Dict[str, Any]) -> PostRecord:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    repo = PostRepository(session)
                    post = await repo.get_by_id(post_id)
                    if post is None:
                        raise PersistenceError(
                            "update", LookupError(f"post {post_id} no existe")
                        )
                    post = await repo.update(post, fields)
                    record = _to_post_record(post)
        except SQLAlchemyError as e:
            logger.warning(f"Update rechazado para post {post_id}: {e}")
            raise PersistenceError("update", e) from e
        return record

    async def get_or_create_author(
        self,
        email: str,
        *,
        username: str,
        credential_factory: Callable[[], str],
    ) -> AuthorRef:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    repo = UserRepository(session)
                    user = await repo.get_by_email(email)
                    if user is None:
                        user = await repo.create(
                            username=username,
                            email=email,
                            password_hash=credential_factory(),
                            is_admin=True,
                            metadata={"createdBy": "wordpress-sync"},
                        )
                        logger.info(f"Autor del sistema creado: {username} <{email}>")
                    author = _to_author_ref(user)
        except SQLAlchemyError as e:
            raise PersistenceError("get_or_create_author", e) from e
        return author

    async def count_posts(self) -> int:
        try:
            async with self._session_factory() as session:
                return await PostRepository(session).count_all()
        except SQLAlchemyError as e:
            raise PersistenceError("count_posts", e) from e

    async def count_imported_posts(self) -> int:
        try:
            async with self._session_factory() as session:
                return await PostRepository(session).count_by_import_source(IMPORT_SOURCES)
        except SQLAlchemyError as e:
            raise PersistenceError("count_imported_posts", e) from e
