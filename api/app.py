"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from allowlist.schemas.errors import AllowlistException
from api.deps import load_runtime_config
from api.errors import (
    APIError,
    allowlist_error_handler,
    api_error_handler,
    generic_error_handler,
)
from api.routes import claims, health, root


# Configure logging: respects ALLOWLIST_LOG_LEVEL and the config file's log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or allowlist.yaml, defaulting to INFO."""
    raw = load_runtime_config().log_level
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Merkle Allowlist API",
        description="""
HTTP API for versioned Merkle allowlist verification and claim settlement.

## Endpoints

- **POST /root/initialize** - Set the initial root and its authority
- **POST /root/rotate** - Publish a new root (authority only)
- **GET /root** - Current root and version
- **GET /root/history** - Every committed root
- **POST /verify** - Check an entitlement proof without claiming
- **POST /claim** - Redeem the caller's entitlement once per root version
- **GET /claims/{beneficiary}** - Claim status for the current version
- **GET /health** - Health check

## Identity

Rotation and claims act on behalf of the caller named in the
`X-Caller-Identity` header, which the fronting authentication layer sets.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(AllowlistException, allowlist_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(root.router)
    app.include_router(claims.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
