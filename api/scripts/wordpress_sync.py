"""
CLI: WordPress -> Postgres (sync one-way de historias).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer); el proyecto no trae scheduler propio.
  - El endpoint POST /api/v1/sync/wordpress hace lo mismo a demanda.

Variables de entorno relevantes:
  - DATABASE_URL (postgresql+asyncpg://...)
  - WORDPRESS_API_URL
  - SYNC_RUN_TIMEOUT_S (opcional)

Ejecución:
  python scripts/wordpress_sync.py
  python scripts/wordpress_sync.py --post-id 1234
  python scripts/wordpress_sync.py --timeout 600 --create-tables

Código de salida: 0 si la corrida termina (aunque haya posts fallidos),
1 ante un error fatal (feed caido, autor no aprovisionable, timeout).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin instalar el paquete.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env si existe (api/.env o raiz del repo).
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from horrorsite.application.use_cases.wordpress_sync_use_cases import (
    SyncDependencies,
    run_single_post_sync,
    run_sync,
)
from horrorsite.core.config import settings
from horrorsite.core.events import configure_file_logging
from horrorsite.infrastructure.database.session import Database
from horrorsite.infrastructure.external.wordpress.wordpress_client import WordPressClient
from horrorsite.infrastructure.repositories.content_storage import ContentStorage
from horrorsite.shared.exceptions.base import AppException


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sincroniza historias desde WordPress")
    parser.add_argument(
        "--post-id",
        type=int,
        default=None,
        help="Sincroniza solo este post de WordPress.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.SYNC_RUN_TIMEOUT_S,
        help="Limite de tiempo de la corrida en segundos (por defecto SYNC_RUN_TIMEOUT_S).",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Crea las tablas si no existen antes de sincronizar.",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="No escribe el log en LOG_FILE.",
    )
    return parser


async def execute(args: argparse.Namespace, database: Optional[Database] = None) -> dict[str, Any]:
    """Construye las dependencias una sola vez y corre el sync."""
    database = database or Database()
    try:
        if args.create_tables:
            await database.init_db()

        async with WordPressClient() as feed:
            deps = SyncDependencies(feed=feed, storage=ContentStorage(database.session_factory))
            if args.post_id is not None:
                return await run_single_post_sync(deps, args.post_id, args.timeout)
            return await run_sync(deps, args.timeout)
    finally:
        await database.close()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.no_log_file:
        configure_file_logging()

    try:
        result = asyncio.run(execute(args))
    except AppException as e:
        logger.error(f"Sync abortado [{e.error_code}]: {e.message}")
        if e.details:
            logger.error(f"Detalles: {e.details}")
        return 1
    except Exception as e:
        logger.opt(exception=e).error(f"Error inesperado durante el sync: {type(e).__name__}")
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
