"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from vinti4_gateway.api.dependencies import get_request_id
from vinti4_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from vinti4_gateway.api.v1 import callbacks, payments
from vinti4_gateway.config import settings
from vinti4_gateway.domain.exceptions import ConfigurationError, DomainException, ValidationError
from vinti4_gateway.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Incomplete request: every missing gateway field is listed"""
    logging.warning(f"Rejected request: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=422, content={"detail": {"message": str(exc), "fields": exc.fields}})


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logging.error(f"Gateway not configured: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=503, content={"detail": str(exc)})


async def domain_error_handler(request: Request, exc: DomainException) -> JSONResponse:
    logging.error(f"Cannot sign request: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Domain errors are mapped here so routes only call the client:
    ValidationError/EncodingError/MissingFieldError → 422,
    ConfigurationError (no merchant credentials) → 503.
    """
    app = FastAPI(
        title="Vinti4Net Payment Gateway Client",
        description="Signed payment and reversal requests, gateway callback verification",
        version="0.1.0",
    )

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(DomainException, domain_error_handler)

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "configured": bool(settings.pos_id and settings.pos_auth_code.get_secret_value()),
        }

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(callbacks.router, prefix="/v1", tags=["callbacks"])

    return app


app = create_app()
