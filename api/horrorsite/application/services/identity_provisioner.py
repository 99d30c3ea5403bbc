"""
Aprovisionamiento del autor del sistema al que se atribuyen los posts importados.
"""
from typing import Optional

from loguru import logger

from horrorsite.application.interfaces.sync_storage import AuthorRef, SyncStorage
from horrorsite.core.config import settings
from horrorsite.core.security import security_service
from horrorsite.shared.exceptions.sync import IdentityProvisionError


class IdentityProvisioner:
    """Get-or-create del autor del sistema."""

    def __init__(self, storage: SyncStorage, *, username: Optional[str] = None):
        self._storage = storage
        self._username = username or settings.SYNC_AUTHOR_USERNAME

    async def get_or_create_system_author(self, email: Optional[str] = None) -> AuthorRef:
        """
        Busca el autor por email y lo crea si no existe (admin, credencial
        aleatoria hasheada con bcrypt).

        Raises:
            IdentityProvisionError: ante cualquier fallo; es fatal para la corrida
        """
        email = email or settings.SYNC_AUTHOR_EMAIL
        try:
            author = await self._storage.get_or_create_author(
                email,
                username=self._username,
                credential_factory=security_service.generate_password_hash,
            )
        except Exception as e:
            logger.error(f"Error obteniendo/creando autor del sistema: {e}")
            raise IdentityProvisionError(email, e) from e

        logger.info(f"Autor del sistema: {author.username} (ID: {author.id})")
        return author
