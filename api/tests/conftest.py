"""
Configuración de fixtures para pytest.
"""
from __future__ import annotations

from typing import Any, AsyncGenerator, Callable, Optional

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from horrorsite.application.interfaces.sync_storage import AuthorRef, PostRecord
from horrorsite.infrastructure.database.session import Base, build_session_factory
from horrorsite.infrastructure.external.wordpress.types import WordPressCategory
from horrorsite.infrastructure.repositories.content_storage import ContentStorage
from horrorsite.shared.exceptions.sync import FetchError, PersistenceError

# Registra los modelos en Base.metadata
import horrorsite.infrastructure.database  # noqa: F401


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """
    Session factory sobre una base SQLite en archivo temporal.

    Se usa archivo (no :memory:) porque ContentStorage abre una conexion
    por operacion y cada conexion en memoria veria una base distinta.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def storage(session_factory) -> ContentStorage:
    return ContentStorage(session_factory)


def wp_post(
    post_id: int,
    title: str = "Untitled",
    content: Any = "<p>Body</p>",
    *,
    slug: Optional[str] = None,
    excerpt: str = "",
    categories: Optional[list[int]] = None,
    date: str = "2024-03-01T10:00:00",
) -> dict[str, Any]:
    """Post con la forma que devuelve /wp/v2/posts con _fields."""
    return {
        "id": post_id,
        "date": date,
        "title": {"rendered": title},
        "content": {"rendered": content},
        "excerpt": {"rendered": excerpt},
        "slug": f"story-{post_id}" if slug is None else slug,
        "categories": categories or [],
    }


class FakeFeed:
    """Feed en memoria: paginas de posts, categorias y fallos inyectables."""

    def __init__(
        self,
        pages: Optional[list[list[dict[str, Any]]]] = None,
        *,
        categories: Optional[dict[int, str]] = None,
        category_error: Optional[Exception] = None,
        page_errors: Optional[dict[int, Exception]] = None,
    ):
        self.pages = pages or []
        self.categories = categories or {}
        self.category_error = category_error
        self.page_errors = page_errors or {}
        self.page_calls: list[tuple[int, int]] = []
        self.category_calls = 0

    async def fetch_posts_page(self, page: int, per_page: int) -> list[dict[str, Any]]:
        self.page_calls.append((page, per_page))
        if page in self.page_errors:
            raise self.page_errors[page]
        if page > len(self.pages):
            return []
        return self.pages[page - 1]

    async def fetch_post(self, post_id: int) -> dict[str, Any]:
        for page in self.pages:
            for post in page:
                if post.get("id") == post_id:
                    return post
        raise FetchError(f"post {post_id} no encontrado", url=f"/posts/{post_id}", http_status=404)

    async def fetch_categories_page(self, page: int, per_page: int) -> list[WordPressCategory]:
        self.category_calls += 1
        if self.category_error is not None:
            raise self.category_error
        items = [WordPressCategory(id=k, name=v) for k, v in sorted(self.categories.items())]
        start = (page - 1) * per_page
        return items[start:start + per_page]


class FakeStorage:
    """SyncStorage en memoria para tests de servicios."""

    def __init__(self, *, fail_on_insert_slugs: tuple[str, ...] = (), author_error: Optional[Exception] = None):
        self.posts: dict[int, dict[str, Any]] = {}
        self.authors: dict[str, AuthorRef] = {}
        self.fail_on_insert_slugs = fail_on_insert_slugs
        self.author_error = author_error
        self.credential_calls = 0
        self._next_id = 1

    def _record(self, post: dict[str, Any]) -> PostRecord:
        return PostRecord(
            id=post["id"], slug=post["slug"], title=post["title"], metadata=dict(post.get("metadata") or {})
        )

    async def find_by_slug(self, slug: str) -> Optional[PostRecord]:
        for post in self.posts.values():
            if post["slug"] == slug:
                return self._record(post)
        return None

    async def insert(self, fields: dict[str, Any]) -> PostRecord:
        if fields["slug"] in self.fail_on_insert_slugs:
            raise PersistenceError("insert", RuntimeError("constraint violation"))
        post = {"id": self._next_id, **fields}
        self.posts[self._next_id] = post
        self._next_id += 1
        return self._record(post)

    async def update(self, post_id: int, fields: dict[str, Any]) -> PostRecord:
        self.posts[post_id].update(fields)
        return self._record(self.posts[post_id])

    async def get_or_create_author(
        self, email: str, *, username: str, credential_factory: Callable[[], str]
    ) -> AuthorRef:
        if self.author_error is not None:
            raise self.author_error
        if email not in self.authors:
            self.credential_calls += 1
            credential_factory()
            self.authors[email] = AuthorRef(id=len(self.authors) + 1, email=email, username=username)
        return self.authors[email]

    async def count_posts(self) -> int:
        return len(self.posts)

    async def count_imported_posts(self) -> int:
        return sum(
            1 for p in self.posts.values()
            if (p.get("metadata") or {}).get("importSource", "").startswith("wordpress-api")
        )


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def fast_hash(monkeypatch) -> None:
    """Evita el costo de bcrypt en tests que crean el autor del sistema."""
    from horrorsite.core import security

    monkeypatch.setattr(security.SecurityService, "hash_password", staticmethod(lambda password: f"hashed:{password}"))


@pytest.fixture
def make_post() -> Callable[..., dict[str, Any]]:
    return wp_post


@pytest.fixture
def make_feed() -> type[FakeFeed]:
    return FakeFeed


@pytest.fixture
def make_storage() -> type[FakeStorage]:
    return FakeStorage
