"""
Interfaz del almacenamiento que consume el pipeline de sincronizacion.

Este contrato existe para:
- Que el orquestador reciba el almacenamiento inyectado (sin engine global).
- Facilitar tests unitarios con dobles en memoria.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol


@dataclass(frozen=True)
class PostRecord:
    """Vista minima de un post persistido."""

    id: int
    slug: str
    title: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthorRef:
    """Referencia al autor al que se atribuyen los posts importados."""

    id: int
    email: str
    username: str


class SyncStorage(Protocol):
    """
    Operaciones de persistencia del sync.

    Implementaciones:
    - ContentStorage sobre SQLAlchemy async.
    - Fake en memoria para tests.

    Cualquier rechazo del almacenamiento debe llegar como PersistenceError.
    """

    async def find_by_slug(self, slug: str) -> Optional[PostRecord]:
        ...

    async def insert(self, fields: dict[str, Any]) -> PostRecord:
        ...

    async def update(self, post_id: int, fields: dict[str, Any]) -> PostRecord:
        ...

    async def get_or_create_author(
        self,
        email: str,
        *,
        username: str,
        credential_factory: Callable[[], str],
    ) -> AuthorRef:
        """
        Busca el autor por email y lo crea si no existe.

        `credential_factory` devuelve el password hash a guardar; solo se
        invoca cuando hay que crear el usuario.
        """
        ...

    async def count_posts(self) -> int:
        ...

    async def count_imported_posts(self) -> int:
        ...
