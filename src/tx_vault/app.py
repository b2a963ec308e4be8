# PUBLIC_INTERFACE
"""
FastAPI application factory and ASGI entrypoint.

Exposes `app` so ASGI servers can import it directly:
    uvicorn tx_vault.app:app --host 0.0.0.0 --port 4000
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes.health import router as health_router
from .api.routes.transactions import router as transactions_router
from .core.errors import ErrorCode, ErrorResponse
from .core.logging import get_logger
from .core.observability import RequestContextMiddleware
from .core.settings import get_settings
from .core.transaction_store import InMemoryTransactionStore, TransactionStore

logger = get_logger(__name__)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # unified envelopes travel in detail; flatten them into the body
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        body = exc.detail
    else:
        body = ErrorResponse(code=f"HTTP_{exc.status_code}", message=str(exc.detail)).model_dump()
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    message = "Invalid request: " + ", ".join(fields) if fields else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(code=ErrorCode.VALIDATION, message=message).model_dump(),
    )


# PUBLIC_INTERFACE
def create_app(store: Optional[TransactionStore] = None) -> FastAPI:
    """Create and configure the FastAPI app instance with CORS, request context and routers.

    A fresh InMemoryTransactionStore is attached unless ``store`` is given.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "startup_complete",
            extra={"host": settings.server.HOST, "port": settings.server.PORT, "env": settings.server.ENV},
        )
        yield

    app = FastAPI(
        title=settings.api.API_TITLE,
        description=settings.api.API_DESCRIPTION,
        version=settings.api.API_VERSION,
        openapi_tags=[
            {"name": "health", "description": "Health and readiness endpoints"},
            {"name": "root", "description": "Root information"},
            {"name": "transactions", "description": "Encrypt, fetch and decrypt party transactions."},
        ],
        lifespan=lifespan,
    )
    app.state.transaction_store = store if store is not None else InMemoryTransactionStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=settings.api.CORS_ALLOW_METHODS,
        allow_headers=settings.api.CORS_ALLOW_HEADERS,
    )
    # Correlation ID / request context middleware
    app.add_middleware(RequestContextMiddleware, logger=logger)

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    app.include_router(health_router)
    app.include_router(transactions_router)
    return app


# Expose app for ASGI import if this module is used directly.
app = create_app()
