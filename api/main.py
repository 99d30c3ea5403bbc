"""
API del sitio de historias de terror.

Expone el sync de WordPress para el panel de administracion; la base de
datos y el cliente del feed viven en app.state (ver core.events.lifespan).
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from horrorsite import __version__
from horrorsite.api.middlewares.error_handler import ErrorHandlerMiddleware
from horrorsite.api.v1.router import api_router
from horrorsite.core.config import get_cors_origins, settings
from horrorsite.core.events import lifespan
from horrorsite.shared.exceptions.base import AppException


async def _handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    # Errores del sync (feed caido, timeout, autor) con su propio status HTTP
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_application() -> FastAPI:
    """
    Arma la app: CORS, red de errores, handler de AppException,
    router /api/v1 y /health.
    """
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Sync de historias desde WordPress hacia la base del sitio",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(settings.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(ErrorHandlerMiddleware)
    application.add_exception_handler(AppException, _handle_app_exception)

    application.include_router(api_router, prefix="/api")

    @application.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "version": __version__,
            "environment": settings.ENVIRONMENT,
            "wordpress_api_url": settings.WORDPRESS_API_URL,
        }

    return application


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
