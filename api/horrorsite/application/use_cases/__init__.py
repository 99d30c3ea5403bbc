"""
Casos de uso de la aplicacion.
"""
from .wordpress_sync_use_cases import SyncOrchestrator, SyncDependencies, run_sync

__all__ = ["SyncOrchestrator", "SyncDependencies", "run_sync"]
