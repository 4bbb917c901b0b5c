"""
Analytics Router - Dashboard aggregates and section exports.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.permissions import Module
from ..staff.dependencies import require_module
from .schemas import AnalyticsData, ExportRequest, ExportResult
from .service import generate_analytics
from .export import export_analytics

router = APIRouter(dependencies=[Depends(require_module(Module.ANALYTICS))])

@router.get("/", response_model=Envelope[AnalyticsData])
async def get_analytics(
    start_date: Optional[str] = Query(None, description="First day, YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="Last day, YYYY-MM-DD"),
    db: Session = Depends(get_db)
):
    """Get analytics for a date range (last 30 days by default)."""
    return ok(generate_analytics(db, start_date, end_date))

@router.post("/export", response_model=Envelope[ExportResult])
async def export(body: ExportRequest, db: Session = Depends(get_db)):
    """Export an analytics section to an Excel or CSV file."""
    result = export_analytics(db, body.section, body.start_date, body.end_date, body.format)
    return ok(result, "Analytics exported successfully")
