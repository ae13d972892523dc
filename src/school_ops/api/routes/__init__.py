"""API routes."""

from school_ops.api.routes.health import router as health_router
from school_ops.api.routes.payroll import router as payroll_router
from school_ops.api.routes.procurement import router as procurement_router
from school_ops.api.routes.setup import router as setup_router

__all__ = ["health_router", "payroll_router", "procurement_router", "setup_router"]
