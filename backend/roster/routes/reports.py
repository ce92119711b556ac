"""
Roster Backend — Report Route Handlers
=======================================

What:  Statistics and stored text reports; any authenticated user.

    GET    /api/reports/statistics       group-by aggregates
    POST   /api/reports                  generate and store → 201
    GET    /api/reports                  list, newest first
    GET    /api/reports/download/{id}    text/plain attachment
    GET    /api/reports/{id}             one report
    DELETE /api/reports/{id}             delete → 204

Ids are taken as strings so a malformed id answers 400 "Invalid report ID"
instead of FastAPI's 422. Fixed paths are declared before /{report_id}.
"""

from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db_session
from roster.dependencies import get_current_user
from roster.models.user import User
from roster.schemas.common import ErrorResponse
from roster.schemas.report import ReportRequest, ReportResponse, StatisticsResponse
from roster.services.report_service import report_service, to_response

router = APIRouter(prefix="/api/reports", tags=["Reports"])

_id_errors = {
    400: {"description": "Invalid report ID", "model": ErrorResponse},
    404: {"description": "Report not found", "model": ErrorResponse},
}


@router.get("/statistics", response_model=StatisticsResponse, summary="Roster statistics")
async def statistics(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> StatisticsResponse:
    return await report_service.get_statistics(db)


@router.post(
    "",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Unknown report type", "model": ErrorResponse}},
    summary="Generate a report",
)
async def create_report(
    body: ReportRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ReportResponse:
    report = await report_service.create_report(
        db, title=body.title, report_type=body.type, created_by=user.username
    )
    return to_response(report)


@router.get("", response_model=List[ReportResponse], summary="List reports")
async def list_reports(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[ReportResponse]:
    return [to_response(r) for r in await report_service.list_reports(db)]


@router.get(
    "/download/{report_id}",
    response_class=Response,
    responses={200: {"content": {"text/plain": {}}}, **_id_errors},
    summary="Download report content as a text file",
)
async def download_report(
    report_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    filename, content = await report_service.download_report(db, report_id)
    return Response(
        content=content,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.get(
    "/{report_id}",
    response_model=ReportResponse,
    responses=_id_errors,
    summary="Get one report",
)
async def get_report(
    report_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ReportResponse:
    return to_response(await report_service.get_report(db, report_id))


@router.delete(
    "/{report_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_id_errors,
    summary="Delete a report",
)
async def delete_report(
    report_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await report_service.delete_report(db, report_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
