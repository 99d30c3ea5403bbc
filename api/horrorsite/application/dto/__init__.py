"""
Data Transfer Objects (DTOs).
"""
from horrorsite.application.dto.sync_dto import (
    FailedRecordDTO,
    SyncSummaryDTO,
    SyncSummaryResponseDTO,
    SinglePostSyncResponseDTO,
    SyncStatusDTO,
)

__all__ = [
    "FailedRecordDTO",
    "SyncSummaryDTO",
    "SyncSummaryResponseDTO",
    "SinglePostSyncResponseDTO",
    "SyncStatusDTO",
]
