"""
API Package

FastAPI routers for exports and reports.
"""

from perfhub.api.export_routes import router as export_router
from perfhub.api.report_routes import router as report_router

__all__ = ["export_router", "report_router"]
