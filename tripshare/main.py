"""Tripshare Functions - FastAPI Application Entry Point.

Serves the plan invitation callables over the Firebase callable protocol.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware

from tripshare.config import (
    ALLOWED_HOSTS,
    CORS_ORIGINS,
    DEBUG,
    logger,
)
from tripshare.errors import CallableError, ErrorCode
from tripshare.middleware import (
    ErrorSanitizationMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
)
from tripshare.routers import functions
from tripshare.schemas import HealthResponse
from tripshare.version import __version__


# -----------------------------------------------------------------------------
# Application Lifespan
# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("Starting Tripshare Functions v%s", __version__)
    yield
    logger.info("Shutting down Tripshare Functions")


# -----------------------------------------------------------------------------
# Application Factory
# -----------------------------------------------------------------------------

def create_app(debug: bool = DEBUG) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Tripshare Functions",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if debug else None,
        redoc_url="/redoc" if debug else None,
        openapi_url="/openapi.json" if debug else None,
    )

    # -------------------------------------------------------------------------
    # Middleware Stack (order matters - first added = last executed)
    # -------------------------------------------------------------------------

    app.add_middleware(ErrorSanitizationMiddleware, debug=debug)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    if ALLOWED_HOSTS and ALLOWED_HOSTS != ["*"]:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=ALLOWED_HOSTS)

    # CORS (innermost middleware for preflight handling)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID", "X-Firebase-AppCheck"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------

    @app.exception_handler(CallableError)
    async def callable_error_handler(request: Request, exc: CallableError):
        """Render typed errors in the callable error envelope."""
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies are INVALID_ARGUMENT."""
        errors = exc.errors()
        clean_errors = [
            {"field": ".".join(str(loc) for loc in err.get("loc", [])), "message": err.get("msg", "Invalid value")}
            for err in errors[:5]
        ]
        error = CallableError(ErrorCode.INVALID_ARGUMENT, "Invalid request payload.")
        body = error.to_dict()
        body["error"]["details"] = clean_errors
        return JSONResponse(status_code=error.http_status, content=body)

    # -------------------------------------------------------------------------
    # Health Check Endpoints
    # -------------------------------------------------------------------------

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    @app.get("/healthz", response_model=HealthResponse, include_in_schema=False)
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers and orchestrators."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now(timezone.utc),
        )

    @app.get("/ready", tags=["Health"])
    async def readiness_check():
        return {"status": "ready"}

    app.include_router(functions.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "tripshare.main:app",
        host="0.0.0.0",
        port=8080,
        reload=DEBUG,
    )
