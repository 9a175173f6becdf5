"""
Export Routes

REST endpoints for downloading domain exports (users, goals, reviews,
feedback, analytics) as CSV or JSON attachments.
"""

import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from perfhub.api.dependencies import get_export_collector
from perfhub.core.errors import DataFetchError, InvalidExportFormatError, InvalidExportTypeError
from perfhub.core.filters import ExportFilters
from perfhub.core.logging import setup_logger
from perfhub.export.export_schema import (
    EXPORT_SCHEMA_VERSION,
    ExportResult,
    available_domains,
    available_formats,
)
from perfhub.export.serializers import count_records
from perfhub.export.service import ExportCollector

logger = setup_logger("INFO")

router = APIRouter(prefix="/export", tags=["Export"])


class ExportRequest(BaseModel):
    """Request model for a domain export."""
    format: str = Field(
        default="csv",
        description="Export format (csv, json or excel; excel is served as CSV)"
    )
    filters: ExportFilters = Field(
        default_factory=ExportFilters,
        description="Optional filters; 'all' or empty means unconstrained"
    )


def attachment_response(result: ExportResult, **headers: str) -> Response:
    """Wrap an ExportResult as a file download."""
    return Response(
        content=result.content_bytes,
        media_type=result.mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            **headers,
        },
    )


@router.get("/capabilities")
async def get_export_capabilities():
    """
    Get information about export capabilities.

    Example response:
        {
            "export_version": "1.0.0",
            "domains": ["users", "goals", "reviews", "feedback", "analytics"],
            "formats": ["csv", "json", "excel"],
            "excel": {"served_as": "csv", ...}
        }
    """
    return {
        "export_version": EXPORT_SCHEMA_VERSION,
        "domains": available_domains(),
        "formats": available_formats(),
        "excel": {
            "served_as": "csv",
            "message": "Excel exports are delivered as CSV files"
        },
    }


@router.get("/departments")
async def get_departments(collector: ExportCollector = Depends(get_export_collector)):
    """Distinct department names for the filter picker."""
    try:
        departments = await collector.list_departments()
        return {"departments": departments}
    except DataFetchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Department lookup failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Department lookup failed: {str(e)}")


@router.post("/{domain}")
async def export_domain(
    domain: str,
    request: Optional[ExportRequest] = None,
    collector: ExportCollector = Depends(get_export_collector),
):
    """
    Export one domain as a file attachment.

    Example:
        POST /export/goals
        {
            "format": "csv",
            "filters": {"department": "Engineering", "status": "active"}
        }

    Returns:
        The serialized export with Content-Disposition set to the
        suggested filename (e.g. goals_2024-03-15.csv)
    """
    request = request or ExportRequest()
    start_time = time.time()

    try:
        result = await collector.export_domain(domain, request.format, request.filters)
        latency_ms = int((time.time() - start_time) * 1000)

        return attachment_response(
            result,
            **{
                "X-Export-Version": EXPORT_SCHEMA_VERSION,
                "X-Export-Rows": str(count_records(result)),
                "X-Export-Latency-Ms": str(latency_ms),
            },
        )

    except HTTPException:
        raise
    except (InvalidExportTypeError, InvalidExportFormatError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataFetchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Export failed: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Export failed: {str(e)}"
        )
