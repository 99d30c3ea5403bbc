"""
Excepciones del pipeline de sincronizacion de contenido.

Politica de propagacion:
- FetchError: fatal al traer paginas de posts; no fatal al traer categorias.
- TransformError / PersistenceError: se capturan por registro y cuentan como fallidos.
- IdentityProvisionError / SyncTimeoutError: fatales, abortan la corrida.
"""
from typing import Any, Optional

from horrorsite.shared.exceptions.base import AppException


class SyncException(AppException):
    """Excepción base para errores del job de sincronizacion."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "SYNC_ERROR",
        details: Optional[dict] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details
        )


class FetchError(SyncException):
    """Fallo de transporte o HTTP al consultar el feed externo."""

    def __init__(self, message: str, url: str = "", http_status: Optional[int] = None):
        details: dict[str, Any] = {"url": url}
        if http_status is not None:
            details["http_status"] = http_status
        super().__init__(
            message=message,
            status_code=502,
            error_code="FEED_FETCH_ERROR",
            details=details
        )
        self.url = url
        self.http_status = http_status


class TransformError(SyncException):
    """Una regla de transformacion fallo sobre el markup de un registro."""

    def __init__(self, stage: str, cause: Exception):
        super().__init__(
            message=f"La etapa '{stage}' fallo: {cause}",
            status_code=422,
            error_code="TRANSFORM_ERROR",
            details={"stage": stage}
        )
        self.stage = stage


class PersistenceError(SyncException):
    """El almacenamiento rechazo un insert/update (constraint, conexion, etc.)."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(
            message=f"Error de persistencia en '{operation}': {cause}",
            error_code="PERSISTENCE_ERROR",
            details={"operation": operation}
        )
        self.operation = operation


class IdentityProvisionError(SyncException):
    """No se pudo obtener ni crear el autor del sistema."""

    def __init__(self, email: str, cause: Exception):
        super().__init__(
            message=f"No se pudo aprovisionar el autor '{email}': {cause}",
            error_code="IDENTITY_PROVISION_ERROR",
            details={"email": email}
        )


class SyncTimeoutError(SyncException):
    """La corrida excedio el presupuesto de tiempo configurado."""

    def __init__(self, timeout_s: float):
        super().__init__(
            message=f"La sincronizacion excedio el limite de {timeout_s} segundos",
            status_code=504,
            error_code="SYNC_TIMEOUT",
            details={"timeout_s": timeout_s}
        )
