"""
Resolucion de categorias de WordPress (id -> nombre).
"""
from typing import Dict, Iterable, List, Optional, Protocol

from loguru import logger

from horrorsite.core.config import settings
from horrorsite.infrastructure.external.wordpress.types import WordPressCategory
from horrorsite.shared.exceptions.sync import FetchError


class CategorySource(Protocol):
    async def fetch_categories_page(self, page: int, per_page: int) -> List[WordPressCategory]:
        ...


class CategoryResolver:
    """
    Trae la taxonomia completa una vez por corrida y la cachea en la instancia.

    Si el feed de categorias falla, la corrida sigue con un mapa vacio:
    todos los posts caen en el tema por defecto.
    """

    def __init__(
        self,
        source: CategorySource,
        *,
        per_page: Optional[int] = None,
        default_theme: Optional[str] = None,
    ):
        self._source = source
        self._per_page = per_page or settings.WORDPRESS_CATEGORIES_PER_PAGE
        self.default_theme = default_theme or settings.SYNC_DEFAULT_THEME
        self._cache: Optional[Dict[int, str]] = None

    async def resolve(self) -> Dict[int, str]:
        if self._cache is not None:
            return self._cache

        try:
            self._cache = await self._fetch_all()
        except FetchError as e:
            logger.warning(f"No se pudieron obtener categorias, se usa '{self.default_theme}': {e.message}")
            self._cache = {}
        else:
            logger.info(f"{len(self._cache)} categorias resueltas")
        return self._cache

    async def _fetch_all(self) -> Dict[int, str]:
        categories: Dict[int, str] = {}
        page = 1
        while True:
            batch = await self._source.fetch_categories_page(page, self._per_page)
            for category in batch:
                categories[category.id] = category.name
            if len(batch) < self._per_page:
                break
            page += 1
        return categories

    def lookup_names(self, category_ids: Iterable[int]) -> List[str]:
        """
        Nombres de las categorias conocidas, en el orden del post.
        IDs desconocidos se descartan.
        """
        mapping = self._cache or {}
        return [mapping[cid] for cid in category_ids if mapping.get(cid)]

    def theme_for(self, names: List[str]) -> str:
        return names[0] if names else self.default_theme
