"""
DTOs del sync de WordPress.
Definen la estructura de las respuestas del endpoint de administracion.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class FailedRecordDTO(BaseModel):
    """Post que no se pudo transformar o persistir."""
    wordpress_id: Optional[int] = None
    title: str
    error: str


class SyncSummaryDTO(BaseModel):
    """Resumen de una corrida completa."""
    sync_id: int = Field(..., description="Epoch en ms del inicio de la corrida")
    start_time: str
    end_time: Optional[str] = None
    total_processed: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    failed_records: List[FailedRecordDTO] = Field(default_factory=list)
    duration_seconds: float = 0.0


class SyncSummaryResponseDTO(BaseModel):
    success: bool = True
    message: str
    summary: SyncSummaryDTO


class SinglePostSyncResponseDTO(BaseModel):
    """Resultado de sincronizar un solo post."""
    id: int = Field(..., description="ID local del post")
    title: str
    action: str = Field(..., description="created | updated")


class SyncStatusDTO(BaseModel):
    status: str = Field(..., description="operational | error")
    total_posts: Optional[int] = None
    wordpress_posts: Optional[int] = None
    last_checked: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_status(cls, data: Dict[str, Any]) -> "SyncStatusDTO":
        return cls(**data)
