"""
Tipos y utilidades puras para el feed de WordPress.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from horrorsite.shared.utils.datetime_utils import DateTimeUtils

# Campos pedidos al endpoint /posts (_fields)
POST_FIELDS = ("id", "date", "title", "content", "excerpt", "slug", "categories")


def _rendered(value: Any) -> Any:
    """
    WordPress envuelve title/content/excerpt en {"rendered": "..."}.

    No se castea el valor: si el feed trae algo que no es string, la
    transformacion del registro lo reporta como fallido.
    """
    if isinstance(value, dict):
        return value.get("rendered", "")
    return value if value is not None else ""


@dataclass(frozen=True)
class WordPressRecord:
    """Post del feed, tal como llega (markup sin limpiar)."""

    wordpress_id: int
    title_markup: Any
    content_markup: Any
    excerpt_markup: Any
    date_raw: Optional[str]
    published_at: Optional[datetime]
    feed_slug: str
    category_ids: tuple[int, ...]

    @property
    def slug(self) -> str:
        """
        Llave estable del post. Si el feed no trae slug se deriva del ID,
        asi el mismo post siempre apunta a la misma fila.
        """
        return self.feed_slug or f"wordpress-{self.wordpress_id}"

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "WordPressRecord":
        """
        Construye el registro desde el JSON de /posts.

        Raises:
            ValueError: si el payload no es un objeto o no trae un id entero
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Post del feed no es un objeto JSON: {payload!r}")

        raw_id = payload.get("id")
        try:
            wordpress_id = int(raw_id)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Post del feed sin id valido: {raw_id!r}") from e

        date_raw = payload.get("date")
        categories = payload.get("categories") or []

        return cls(
            wordpress_id=wordpress_id,
            title_markup=_rendered(payload.get("title")),
            content_markup=_rendered(payload.get("content")),
            excerpt_markup=_rendered(payload.get("excerpt")),
            date_raw=date_raw,
            published_at=DateTimeUtils.from_iso_string(date_raw) if date_raw else None,
            feed_slug=str(payload.get("slug") or "").strip(),
            category_ids=tuple(
                int(c) for c in categories if isinstance(c, int) or str(c).isdigit()
            ),
        )


@dataclass(frozen=True)
class WordPressCategory:
    """Categoria del feed (id -> nombre)."""

    id: int
    name: str

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "WordPressCategory":
        return cls(id=int(payload["id"]), name=str(payload.get("name") or ""))
