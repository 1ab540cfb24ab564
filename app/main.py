import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.vacations.router import router as vacations_router
from app.api.v1.vacations.validation import format_errors
from app.core.config import settings
from app.core.exceptions import ServiceError, ValidationError
from app.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies like engine validation failures: 400 with every bad field."""
    error = ValidationError(format_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_detail()})


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": {"error": "InternalError", "message": "Internal server error"}},
    )


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="HR Vacations Backend")

    # CORS: allow frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/health", tags=["health"])
    async def health_check():
        return {"status": "ok", "service": "hr-vacations"}

    # Routers
    app.include_router(vacations_router)

    return app


app = create_app()
