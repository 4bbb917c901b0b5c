"""
Analytics Export - Writes dashboard sections to spreadsheet files.
"""
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from sqlalchemy.orm import Session
import csv
import logging

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from ..config import settings
from ..exceptions import ValidationFailedException, UnsupportedFormatException
from .schemas import AnalyticsData
from .service import generate_analytics

# Set up logging
logger = logging.getLogger(__name__)

PDF_UNSUPPORTED = "PDF export requires additional setup. Please use Excel or CSV format."

FORMAT_EXTENSIONS = {
    "excel": "xlsx",
    "csv": "csv",
}

def _money(value) -> float:
    return round(float(value or 0), 2)

def _overview_rows(data: AnalyticsData) -> List[List[Any]]:
    patients = data.patient_stats
    revenue = data.revenue_stats
    return [
        ["Metric", "Value"],
        ["Total Patients", patients.total],
        ["New Patients", patients.new],
        ["Returning Patients", patients.returning],
        ["Average Patients Per Day", patients.average_per_day],
        ["Total Revenue", _money(revenue.total)],
        ["Consultation Revenue", _money(revenue.consultations)],
        ["Medicine Revenue", _money(revenue.medicines)],
        ["Optical Revenue", _money(revenue.opticals)],
        ["Operation Revenue", _money(revenue.operations)],
        ["Lab Revenue", _money(revenue.labs + revenue.vlabs)],
        ["Pending Amount", _money(revenue.pending)],
        ["Total Receipts", data.receipt_stats.total],
        ["Pending Receipts", data.receipt_stats.pending],
    ]

def _trend_rows(data: AnalyticsData) -> List[List[Any]]:
    rows = [["Date", "Patients", "Revenue", "Medicines", "Opticals"]]
    for point in data.time_series:
        rows.append([point.date.isoformat(), point.patients, _money(point.revenue), point.medicines, point.opticals])
    return rows

def _suggestion_rows(data: AnalyticsData) -> List[List[Any]]:
    conditions = data.patient_stats.conditions
    medicines = data.medicine_stats.top_medicines
    brands = data.optical_stats.top_brands
    hours = data.treatment_stats.peak_hours
    peak = max(hours, key=lambda h: h.count) if hours else None
    return [
        ["Insight", "Value"],
        ["Top Condition", f"{conditions[0].name} ({conditions[0].count})" if conditions else "None recorded"],
        ["Treatment Success Rate", f"{data.treatment_stats.success_rate}%"],
        ["Top Medicine", f"{medicines[0].name} ({medicines[0].quantity})" if medicines else "None dispensed"],
        ["Out Of Stock Medicines", data.medicine_stats.out_of_stock],
        ["Low Stock Medicines", data.medicine_stats.low_stock],
        ["Top Optical Brand", f"{brands[0].name} ({brands[0].quantity})" if brands else "None dispensed"],
        ["Peak Hour", f"{peak.hour} ({peak.count})" if peak else "No times recorded"],
    ]

SECTIONS: Dict[str, Callable[[AnalyticsData], List[List[Any]]]] = {
    "overview": _overview_rows,
    "trends": _trend_rows,
    "suggestions": _suggestion_rows,
}

def _write_excel(path: Path, title: str, rows: List[List[Any]]) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(row)

    width = max((len(row) for row in rows), default=0)
    for col in range(1, width + 1):
        ws.column_dimensions[get_column_letter(col)].width = 24

    wb.save(path)

def _write_csv(path: Path, rows: List[List[Any]]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as fp:
        csv.writer(fp).writerows(rows)

def export_analytics(
    db: Session,
    section: str,
    start=None,
    end=None,
    file_format: str = "excel",
    export_dir: Optional[str] = None
) -> Dict[str, Any]:
    """
    Export one analytics section to a file.

    Args:
        db: Database session
        section: overview, trends or suggestions
        start: First day of the range (defaults to 29 days before end)
        end: Last day of the range (defaults to today)
        file_format: excel or csv
        export_dir: Target directory (defaults to settings.export_dir)

    Returns:
        Dict with file_path, section, format and rows (data rows, header excluded)

    Raises:
        UnsupportedFormatException: If PDF is requested
        ValidationFailedException: If the section, format or range is invalid
    """
    file_format = (file_format or "").strip().lower()
    if file_format == "pdf":
        raise UnsupportedFormatException(PDF_UNSUPPORTED)
    if file_format not in FORMAT_EXTENSIONS:
        raise ValidationFailedException(f"Unsupported export format: {file_format}")

    section = (section or "").strip().lower()
    builder = SECTIONS.get(section)
    if builder is None:
        raise ValidationFailedException(f"Invalid export section: {section}")

    data = generate_analytics(db, start, end)
    rows = builder(data)

    target_dir = Path(export_dir or settings.export_dir).expanduser()
    target_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    path = target_dir / f"analytics_{section}_{timestamp}.{FORMAT_EXTENSIONS[file_format]}"

    if file_format == "excel":
        _write_excel(path, section.capitalize(), rows)
    else:
        _write_csv(path, rows)

    logger.info(f"Analytics {section} exported to {path}")
    return {
        "file_path": str(path),
        "section": section,
        "format": file_format,
        "rows": len(rows) - 1,
    }
