"""
Implementación del repositorio de posts.
Maneja las operaciones de base de datos para la entidad PostModel.
"""
from typing import Any, Dict, Iterable, Optional
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from horrorsite.infrastructure.database.models import PostModel


class PostRepository:
    """Repositorio para gestionar posts en la base de datos."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, post_id: int) -> Optional[PostModel]:
        """Obtiene un post por su ID."""
        return await self.db.get(PostModel, post_id)

    async def get_by_slug(self, slug: str) -> Optional[PostModel]:
        """
        Obtiene un post por su slug.
        """
        result = await self.db.execute(
            select(PostModel).where(PostModel.slug == slug)
        )
        return result.scalars().first()

    async def create(self, data: Dict[str, Any]) -> PostModel:
        """
        Crea un nuevo post.

        Args:
            data: Columnas del post; "metadata" se mapea a post_meta

        Returns:
            PostModel: Post creado
        """
        values = dict(data)
        if "metadata" in values:
            values["post_meta"] = values.pop("metadata")

        post = PostModel(**values)
        self.db.add(post)
        await self.db.flush()
        await self.db.refresh(post)
        return post

    async def update(self, post: PostModel, data: Dict[str, Any]) -> PostModel:
        """
        Actualiza un post existente campo por campo.
        """
        for key, value in data.items():
            if key == "metadata":
                # Asignacion nueva: JSON no detecta mutaciones in-place
                post.post_meta = dict(value) if value is not None else None
            elif hasattr(post, key):
                setattr(post, key, value)

        await self.db.flush()
        await self.db.refresh(post)
        return post

    async def count_all(self) -> int:
        """Cuenta todos los posts."""
        result = await self.db.execute(select(func.count(PostModel.id)))
        return int(result.scalar() or 0)

    async def count_by_import_source(self, sources: Iterable[str]) -> int:
        """
        Cuenta los posts cuyo metadata.importSource esta en `sources`.
        """
        result = await self.db.execute(
            select(func.count(PostModel.id)).where(
                PostModel.post_meta["importSource"].as_string().in_(list(sources))
            )
        )
        return int(result.scalar() or 0)
