"""
Request-scoped providers for the API routers.

A fresh collector/assembler is built per request around the repository;
tests override ``get_repository`` with an in-memory fake.
"""

from fastapi import Depends

from perfhub.core.db import PerformanceRepository
from perfhub.export.service import ExportCollector
from perfhub.reports.generator import ReportAssembler


def get_repository() -> PerformanceRepository:
    return PerformanceRepository()


def get_export_collector(repository=Depends(get_repository)) -> ExportCollector:
    return ExportCollector(repository)


def get_report_assembler(collector: ExportCollector = Depends(get_export_collector)) -> ReportAssembler:
    return ReportAssembler(collector)
