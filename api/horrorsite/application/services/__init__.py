"""
Servicios de aplicacion.

Piezas del pipeline de sincronizacion que el orquestador compone.
"""
from horrorsite.application.services.content_transformer import (
    ContentTransformer,
    TransformStage,
    TransformedFields,
    CONTENT_STAGES,
)
from horrorsite.application.services.category_resolver import CategoryResolver
from horrorsite.application.services.identity_provisioner import IdentityProvisioner
from horrorsite.application.services.record_reconciler import RecordReconciler, ReconcileOutcome

__all__ = [
    # Transformacion
    "ContentTransformer",
    "TransformStage",
    "TransformedFields",
    "CONTENT_STAGES",
    # Resolucion
    "CategoryResolver",
    "IdentityProvisioner",
    # Reconciliacion
    "RecordReconciler",
    "ReconcileOutcome",
]
