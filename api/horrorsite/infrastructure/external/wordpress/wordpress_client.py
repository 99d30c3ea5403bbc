"""
Cliente mínimo de la WordPress REST API (wp/v2) sobre httpx async.

Requisitos cubiertos:
- paginación por page/per_page
- fin de feed: página vacía o HTTP 400 ("page out of range")
- rate-limit/backoff (429, 5xx, errores de transporte)
- selección de campos con _fields
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

import httpx
from loguru import logger

from horrorsite.core.config import settings
from horrorsite.infrastructure.external.wordpress.types import POST_FIELDS, WordPressCategory
from horrorsite.shared.exceptions.sync import FetchError


class WordPressClient:
    """
    Cliente HTTP del feed. Devuelve los posts como dicts JSON crudos;
    el parseo a WordPressRecord se hace por registro en el orquestador
    para que un post mal formado no tumbe la página completa.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_s: Optional[float] = None,
        max_retries: Optional[int] = None,
        min_backoff_s: Optional[float] = None,
        max_backoff_s: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._base_url = (base_url or settings.WORDPRESS_API_URL).rstrip("/")
        self._timeout_s = settings.WORDPRESS_TIMEOUT_S if timeout_s is None else timeout_s
        self._max_retries = settings.WORDPRESS_MAX_RETRIES if max_retries is None else max_retries
        self._min_backoff_s = settings.WORDPRESS_MIN_BACKOFF_S if min_backoff_s is None else min_backoff_s
        self._max_backoff_s = settings.WORDPRESS_MAX_BACKOFF_S if max_backoff_s is None else max_backoff_s
        self._sleep = sleep
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self._timeout_s)

    async def __aenter__(self) -> "WordPressClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cierra el cliente HTTP solo si lo creamos nosotros."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch_posts_page(self, page: int, per_page: int) -> list[dict[str, Any]]:
        """
        Trae una página del listado de posts.

        Una página fuera de rango (HTTP 400 de WordPress) se interpreta como
        fin del feed y devuelve [].
        """
        payload = await self._request_json(
            "/posts",
            params={
                "page": page,
                "per_page": per_page,
                "_fields": ",".join(POST_FIELDS),
            },
            out_of_range_ok=True,
        )
        if payload is None:
            logger.info(f"Página {page} fuera de rango, fin del feed")
            return []
        if not isinstance(payload, list):
            raise FetchError(
                f"Respuesta inesperada en página {page}: se esperaba una lista",
                url=f"{self._base_url}/posts",
            )
        return payload

    async def fetch_post(self, post_id: int) -> dict[str, Any]:
        """Trae un solo post por su ID de WordPress."""
        payload = await self._request_json(
            f"/posts/{post_id}",
            params={"_fields": ",".join(POST_FIELDS)},
        )
        if not isinstance(payload, dict):
            raise FetchError(
                f"Respuesta inesperada para el post {post_id}",
                url=f"{self._base_url}/posts/{post_id}",
            )
        return payload

    async def fetch_categories_page(self, page: int, per_page: int) -> list[WordPressCategory]:
        """Trae una página de la taxonomía de categorías."""
        payload = await self._request_json(
            "/categories",
            params={"page": page, "per_page": per_page},
            out_of_range_ok=True,
        )
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise FetchError(
                "Respuesta inesperada en categorías: se esperaba una lista",
                url=f"{self._base_url}/categories",
            )
        try:
            return [WordPressCategory.from_api(item) for item in payload]
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(
                f"Categoría mal formada en el feed: {e}",
                url=f"{self._base_url}/categories",
            ) from e

    def _backoff_seconds(self, attempt: int, retry_after: Optional[str] = None) -> float:
        """
        Espera antes del siguiente intento.

        - Retry-After si el servidor lo manda.
        - Si no, exponencial simple + jitter proporcional.
        """
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                return self._min_backoff_s
        base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
        return base + (0.15 * base)

    async def _request_json(
        self,
        path: str,
        *,
        params: dict[str, Any],
        out_of_range_ok: bool = False,
    ) -> Any:
        """
        GET con backoff para 429/5xx y errores de transporte.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - 5xx / transporte: exponencial con jitter.
        - 400 con out_of_range_ok: devuelve None (fin de paginación).
        - 4xx (no 429): error inmediato.
        """
        url = f"{self._base_url}{path}"

        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._client.get(url, params=params, timeout=self._timeout_s)
            except httpx.TransportError as e:
                if attempt >= self._max_retries:
                    raise FetchError(
                        f"Error de transporte contra WordPress tras {attempt} reintentos: {e}",
                        url=url,
                    ) from e
                sleep_s = self._backoff_seconds(attempt)
                logger.warning(f"Transporte fallo ({e}), reintento en {sleep_s:.2f}s: {url}")
                await self._sleep(sleep_s)
                continue

            if 200 <= resp.status_code < 300:
                try:
                    return resp.json()
                except ValueError as e:
                    raise FetchError(
                        f"WordPress devolvió un cuerpo que no es JSON: {e}",
                        url=url,
                        http_status=resp.status_code,
                    ) from e

            if resp.status_code == 400 and out_of_range_ok:
                return None

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise FetchError(
                        f"WordPress error {resp.status_code} tras {attempt} reintentos: {resp.text}",
                        url=url,
                        http_status=resp.status_code,
                    )
                sleep_s = self._backoff_seconds(attempt, resp.headers.get("Retry-After"))
                logger.warning(
                    f"WordPress respondio {resp.status_code}, reintento en {sleep_s:.2f}s: {url}"
                )
                await self._sleep(sleep_s)
                continue

            # Errores no recuperables
            raise FetchError(
                f"WordPress request falló {resp.status_code}: {resp.text}",
                url=url,
                http_status=resp.status_code,
            )

        # range(max_retries + 1) siempre retorna o lanza antes de llegar aqui
        raise FetchError(f"WordPress request sin respuesta: {url}", url=url)
