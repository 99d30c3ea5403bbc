"""
Endpoints para sincronizacion de contenido externo.
Permite disparar el sync de WordPress desde el panel de administracion.
"""
from fastapi import APIRouter, Depends, Path, status
from loguru import logger

from horrorsite.api.v1.dependencies.use_case_deps import get_sync_orchestrator
from horrorsite.application.dto.sync_dto import (
    SinglePostSyncResponseDTO,
    SyncStatusDTO,
    SyncSummaryDTO,
    SyncSummaryResponseDTO,
)
from horrorsite.application.use_cases.wordpress_sync_use_cases import SyncOrchestrator


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/wordpress",
    response_model=SyncSummaryResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def sync_wordpress(
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> SyncSummaryResponseDTO:
    """
    Ejecuta una corrida completa del sync de WordPress.

    Los errores fatales (feed caido, autor no aprovisionable) llegan como
    AppException y los convierte el handler global.
    """
    logger.info("Sync de WordPress solicitado desde la API")
    summary = await orchestrator.run()
    return SyncSummaryResponseDTO(
        message=(
            f"Sync completado: {summary['created']} creados, "
            f"{summary['updated']} actualizados, {summary['failed']} fallidos"
        ),
        summary=SyncSummaryDTO(**summary),
    )


@router.get("/wordpress/status", response_model=SyncStatusDTO)
async def wordpress_sync_status(
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> SyncStatusDTO:
    """Contadores de posts totales e importados desde WordPress."""
    return SyncStatusDTO.from_status(await orchestrator.get_status())


@router.post("/wordpress/{post_id}", response_model=SinglePostSyncResponseDTO)
async def sync_wordpress_post(
    post_id: int = Path(..., gt=0, description="ID del post en WordPress"),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> SinglePostSyncResponseDTO:
    """Sincroniza un solo post de WordPress por su ID."""
    result = await orchestrator.sync_single_post(post_id)
    return SinglePostSyncResponseDTO(**result)
