from datetime import datetime, timezone

from fastapi import Request, status
from fastapi.responses import JSONResponse

from fitplan.core.exceptions import (
    BusinessRuleError,
    DomainError,
    EmbeddingDimensionMismatchError,
    NoAlternativeFoundError,
    NotFoundError,
    PreconditionFailedError,
    ProviderUnavailableError,
    ValidationError,
)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PreconditionFailedError: status.HTTP_412_PRECONDITION_FAILED,
    BusinessRuleError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NoAlternativeFoundError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ProviderUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    EmbeddingDimensionMismatchError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_MAP.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(
        status_code=status_code,
        content={
            "data": None,
            "meta": {
                "request_id": getattr(request.state, "request_id", None),
                "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            },
            "errors": [
                {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                }
            ],
        },
    )
