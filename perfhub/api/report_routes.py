"""
Report Routes

Generate styled HTML reports, either inline (JSON with the HTML document)
or as a downloadable ``.html`` file.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from perfhub.api.dependencies import get_report_assembler
from perfhub.api.export_routes import attachment_response
from perfhub.core.errors import DataFetchError, InvalidReportTypeError
from perfhub.core.filters import ExportFilters
from perfhub.core.logging import setup_logger
from perfhub.reports.generator import ReportAssembler, ReportResult, build_report_download
from perfhub.reports.report_types import available_report_types

logger = setup_logger("INFO")

router = APIRouter(prefix="/reports", tags=["Reports"])


class ReportRequest(BaseModel):
    """Request model for report generation."""
    filters: ExportFilters = Field(
        default_factory=ExportFilters,
        description="Filters applied to every domain the report reads"
    )


class ReportResponse(BaseModel):
    """Response model for an inline report."""
    title: str
    html: str
    data: dict


async def _generate(assembler: ReportAssembler, report_type: str, request: ReportRequest) -> ReportResult:
    try:
        return await assembler.generate_report(report_type, request.filters)
    except InvalidReportTypeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataFetchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Report generation failed: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Report generation failed: {str(e)}"
        )


@router.get("/types")
async def get_report_types():
    """Report types available to the report picker."""
    return {"report_types": available_report_types()}


@router.post("/{report_type}", response_model=ReportResponse)
async def generate_report(
    report_type: str,
    request: Optional[ReportRequest] = None,
    assembler: ReportAssembler = Depends(get_report_assembler),
):
    """
    Generate a report and return its HTML document inline.

    Example:
        POST /reports/quarterly-review
        {"filters": {"department": "Engineering"}}
    """
    report = await _generate(assembler, report_type, request or ReportRequest())
    return ReportResponse(title=report.title, html=report.html, data=report.data)


@router.post("/{report_type}/download")
async def download_report(
    report_type: str,
    request: Optional[ReportRequest] = None,
    assembler: ReportAssembler = Depends(get_report_assembler),
):
    """Generate a report and return it as an ``.html`` attachment."""
    report = await _generate(assembler, report_type, request or ReportRequest())
    return attachment_response(build_report_download(report))
