"""
Renders domain errors raised at the HTTP boundary.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from travel_agency.core.logging import get_logger
from travel_agency.domain.errors import DomainError

logger = get_logger(__name__)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("domain_error", code=exc.code.value, error=exc.message)
    else:
        logger.info("domain_error", code=exc.code.value, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code.value, **exc.extra()},
    )


EXCEPTION_HANDLERS = {
    DomainError: domain_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
