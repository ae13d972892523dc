"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from school_ops.api.routes import (
    health_router,
    payroll_router,
    procurement_router,
    setup_router,
)
from school_ops.config import get_settings
from school_ops.demo import seed_demo
from school_ops.payroll import InvalidRateCardError, MissingRateCardError
from school_ops.procurement import CyclicHierarchyError
from school_ops.store import NotFoundError, Store

logger = logging.getLogger(__name__)


def create_app(store: Store | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="School Ops API",
        description="Procurement approvals and teacher payroll",
        version="0.1.0",
    )
    if store is None:
        store = Store()
        if get_settings().seed_demo:
            seed_demo(store)
    app.state.store = store

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        """Unknown staff, budgets, requests or runs."""
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": "NOT_FOUND"},
        )

    @app.exception_handler(CyclicHierarchyError)
    @app.exception_handler(MissingRateCardError)
    @app.exception_handler(InvalidRateCardError)
    async def data_integrity_handler(request: Request, exc: Exception) -> JSONResponse:
        """Roster or rate card data the engines refuse to compute over."""
        logger.error("Data integrity error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "code": "DATA_INTEGRITY"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(setup_router, prefix="/api/v1")
    app.include_router(procurement_router, prefix="/api/v1")
    app.include_router(payroll_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
