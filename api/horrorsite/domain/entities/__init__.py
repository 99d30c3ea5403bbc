"""
Entidades del dominio.
"""
from horrorsite.domain.entities.sync_run import SyncRun

__all__ = ["SyncRun"]
