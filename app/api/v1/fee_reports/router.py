"""Fee reports router: dashboard stats, unpaid students, fee report. Read-only views over the fee engine."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import DashboardResponse, FeeReportResponse, UnpaidStudentItem
from . import service

router = APIRouter(prefix="/api/v1/fee-reports", tags=["fee-reports"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    start_date: Optional[date] = Query(None, description="Defaults to 1 January of the current year"),
    end_date: Optional[date] = Query(None, description="Defaults to the end of the current month"),
    class_id: Optional[str] = Query(None, description="Class id or 'all'"),
    search: Optional[str] = Query(None, description="Student name or registration number"),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    try:
        return await service.get_dashboard(
            db,
            start_date=start_date,
            end_date=end_date,
            class_id=class_id,
            search=search,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/unpaid", response_model=List[UnpaidStudentItem])
async def list_unpaid_students(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    class_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[UnpaidStudentItem]:
    try:
        return await service.get_unpaid_students(
            db,
            start_date=start_date,
            end_date=end_date,
            class_id=class_id,
            search=search,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/report", response_model=FeeReportResponse)
async def get_fee_report(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    class_id: Optional[str] = Query(None),
    section: Optional[str] = Query(None, description="Section letter or 'all'"),
    student_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> FeeReportResponse:
    try:
        return await service.get_fee_report(
            db,
            start_date=start_date,
            end_date=end_date,
            class_id=class_id,
            section=section,
            student_id=student_id,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
