"""Map domain errors to HTTP responses"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.INVALID_RANGE: 400,
    ErrorCode.INVALID_QUERY: 400,
    ErrorCode.INVALID_LISTING: 400,
    ErrorCode.UNAUTHORIZED: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.OVERLAPPING_RANGE: 409,
    ErrorCode.DUPLICATE_RANGE: 409,
    ErrorCode.DATE_RANGE_UNAVAILABLE: 409,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INVALID_STATE: 409,
    ErrorCode.CAPACITY_EXCEEDED: 422,
}


def error_response(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        }
    }


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        status_code = STATUS_BY_CODE.get(exc.code, 400)
        logger.info("%s %s -> %s %s", request.method, request.url.path, status_code, exc)
        return JSONResponse(
            status_code=status_code,
            content=error_response(exc.code.value, exc.message),
        )
