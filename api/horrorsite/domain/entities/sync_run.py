"""
Entidad de dominio para una corrida de sincronizacion.

Acumula contadores mientras el orquestador recorre las paginas del feed y
produce el resumen final (el reporte que imprime el job).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from horrorsite.shared.utils.datetime_utils import DateTimeUtils


def _new_sync_id() -> int:
    # Epoch en milisegundos, mismo formato de syncId que ya tiene el sitio
    return int(DateTimeUtils.now_utc().timestamp() * 1000)


@dataclass
class SyncRun:
    """
    Estado mutable de una corrida.

    Ciclo de vida: se crea al iniciar, se finaliza tras la ultima pagina o
    se abandona si ocurre un error fatal (sin resumen).
    """

    sync_id: int = field(default_factory=_new_sync_id)
    started_at: datetime = field(default_factory=DateTimeUtils.now_utc)
    finished_at: Optional[datetime] = None

    total_processed: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    failed_records: List[Dict[str, Any]] = field(default_factory=list)

    def record_created(self) -> None:
        self.created += 1

    def record_updated(self) -> None:
        self.updated += 1

    def record_failure(self, wordpress_id: Optional[int], title: str, error: str) -> None:
        self.failed += 1
        self.failed_records.append(
            {"wordpress_id": wordpress_id, "title": title, "error": error}
        )

    def finalize(self) -> None:
        self.finished_at = DateTimeUtils.now_utc()

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    @property
    def duration_seconds(self) -> float:
        end = self.finished_at or DateTimeUtils.now_utc()
        return round((end - self.started_at).total_seconds(), 3)

    def summary(self) -> Dict[str, Any]:
        """Resumen serializable de la corrida."""
        return {
            "sync_id": self.sync_id,
            "start_time": DateTimeUtils.to_iso_string(self.started_at),
            "end_time": DateTimeUtils.to_iso_string(self.finished_at) if self.finished_at else None,
            "total_processed": self.total_processed,
            "created": self.created,
            "updated": self.updated,
            "failed": self.failed,
            "failed_records": list(self.failed_records),
            "duration_seconds": self.duration_seconds,
        }
