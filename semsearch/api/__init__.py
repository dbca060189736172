"""semsearch API layer: routes, schemas, and middleware."""

from semsearch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from semsearch.api.routes import router
from semsearch.api.schemas import (
    ErrorResponse,
    HealthResponse,
    SearchHit,
    SearchRequest,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ErrorResponse",
    "HealthResponse",
    "SearchHit",
    "SearchRequest",
]
