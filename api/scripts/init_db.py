"""
Script para inicializar la base de datos (crea users y posts si no existen).

Para entornos gestionados preferir `alembic upgrade head`.
"""
import asyncio
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

load_dotenv(_API_ROOT / ".env", override=False)

from horrorsite.infrastructure.database.session import Database


async def main():
    """Función principal para inicializar la base de datos."""
    logger.info("Inicializando base de datos...")
    database = Database()

    try:
        await database.init_db()
        logger.success("Base de datos inicializada correctamente")
    except Exception as e:
        logger.error(f"Error al inicializar base de datos: {e}")
        raise
    finally:
        await database.close()


if __name__ == "__main__":
    asyncio.run(main())
