"""
Analytics Service - Aggregates clinic activity over a date range.

Every source is fetched on its own; a source that fails to load is logged and
contributes zeros so the rest of the dashboard still renders.
"""
from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Tuple
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
import logging
import re

from ..config import settings
from ..exceptions import ValidationFailedException
from ..core.dates import clinic_today, day_bounds_utc, days_in_range, parse_date, to_local_date
from ..patients.models import Patient
from ..prescriptions.models import Prescription, REVIEW_PAID_FOR
from ..operations.models import Operation
from ..medicines.models import Medicine, MedicineDispenseRecord, StockStatus
from ..opticals.models import OpticalDispenseRecord, OpticalType
from ..labs.models import LabRecord, LabType
from .schemas import (
    AnalyticsData, PatientStats, RevenueStats, ReceiptStats, MedicineStats,
    OpticalStats, TreatmentStats, TimeSeriesPoint, NamedCount, NamedQuantity, HourCount
)

# Set up logging
logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 30
TOP_N = 5

AGE_GROUPS = ("under 18", "18 to 30", "31 to 45", "46 to 60", "above 60")

_HOUR_PATTERN = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?(?::\d{2})?\s*([AaPp][Mm])?\s*$")


def resolve_range(start=None, end=None) -> Tuple[date, date]:
    """
    Resolve an inclusive analytics range.

    Missing bounds default to the last 30 days ending today.

    Raises:
        ValidationFailedException: If a bound is malformed or start is after end
    """
    end_date = parse_date(end, required=False) or clinic_today()
    start_date = parse_date(start, required=False) or end_date - timedelta(days=DEFAULT_RANGE_DAYS - 1)
    if start_date > end_date:
        raise ValidationFailedException("Start date must be on or before end date")
    return start_date, end_date


# Source fetchers

def _fetch_patients(db: Session, start: date, end: date) -> List[Patient]:
    return db.query(Patient).filter(Patient.date >= start, Patient.date <= end).all()

def _fetch_prescriptions(db: Session, start: date, end: date) -> List[Prescription]:
    return db.query(Prescription).filter(Prescription.date >= start, Prescription.date <= end).all()

def _fetch_medicine_dispenses(db: Session, start: date, end: date) -> List[MedicineDispenseRecord]:
    lower, _ = day_bounds_utc(start)
    _, upper = day_bounds_utc(end)
    return (
        db.query(MedicineDispenseRecord)
        .filter(MedicineDispenseRecord.dispensed_date >= lower, MedicineDispenseRecord.dispensed_date < upper)
        .all()
    )

def _fetch_optical_dispenses(db: Session, start: date, end: date) -> List[OpticalDispenseRecord]:
    lower, _ = day_bounds_utc(start)
    _, upper = day_bounds_utc(end)
    return (
        db.query(OpticalDispenseRecord)
        .filter(OpticalDispenseRecord.dispensed_at >= lower, OpticalDispenseRecord.dispensed_at < upper)
        .all()
    )

def _fetch_operations(db: Session, start: date, end: date) -> List[Operation]:
    # Operations without an operation date fall back to their admission date
    return (
        db.query(Operation)
        .filter(
            or_(
                and_(Operation.date_of_operation >= start, Operation.date_of_operation <= end),
                and_(
                    Operation.date_of_operation.is_(None),
                    Operation.date_of_admit >= start,
                    Operation.date_of_admit <= end,
                ),
            )
        )
        .all()
    )

def _fetch_labs(db: Session, start: date, end: date) -> List[LabRecord]:
    return db.query(LabRecord).filter(LabRecord.date >= start, LabRecord.date <= end).all()

def _fetch_medicine_stock(db: Session, start: date, end: date) -> List[Medicine]:
    return db.query(Medicine).all()


def _safe_fetch(db: Session, name: str, fetcher: Callable, start: date, end: date, failed: List[str]) -> list:
    try:
        return fetcher(db, start, end)
    except Exception as e:
        logger.error(f"Analytics source {name} failed to load: {str(e)}")
        db.rollback()
        failed.append(name)
        return []


# Small helpers

def _amount(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0

def _top(counter: Counter, limit: int = TOP_N) -> List[Tuple[str, int]]:
    # sorted() is stable, so ties keep first-seen order
    return sorted(counter.items(), key=lambda item: -item[1])[:limit]

def _gender_key(value: Optional[str]) -> str:
    text = (value or "").strip().lower()
    if text.startswith("f"):
        return "female"
    if text.startswith("m"):
        return "male"
    return "other"

def _age_at(patient: Patient, year: int) -> Optional[int]:
    if patient.dob:
        return year - patient.dob.year
    if patient.age is not None:
        return int(patient.age)
    return None

def _age_group(age: int) -> str:
    if age < 18:
        return "under 18"
    if age <= 30:
        return "18 to 30"
    if age <= 45:
        return "31 to 45"
    if age <= 60:
        return "46 to 60"
    return "above 60"

def parse_hour(value: Optional[str]) -> Optional[int]:
    """
    Hour of day (0-23) from a recorded time such as "14:30" or "2:30 PM".

    Returns None for blank or unreadable values.
    """
    if not value:
        return None
    match = _HOUR_PATTERN.match(str(value))
    if not match:
        return None
    hour = int(match.group(1))
    meridiem = (match.group(3) or "").lower()
    if meridiem:
        if hour < 1 or hour > 12:
            return None
        hour = hour % 12 + (12 if meridiem == "pm" else 0)
    if hour > 23:
        return None
    return hour

def _optical_revenue(record: OpticalDispenseRecord) -> float:
    return _amount(record.price) * (record.quantity or 0)


# Section builders

def _patient_stats(patients: List[Patient], prescriptions: List[Prescription], end: date, days: int) -> PatientStats:
    stats = PatientStats(total=len(patients))

    visits = Counter(p.patient_id for p in patients)
    stats.new = sum(1 for p in patients if visits[p.patient_id] == 1)
    stats.returning = stats.total - stats.new

    genders = {"male": 0, "female": 0, "other": 0}
    ages = {group: 0 for group in AGE_GROUPS}
    for patient in patients:
        genders[_gender_key(patient.gender)] += 1
        age = _age_at(patient, end.year)
        if age is not None:
            ages[_age_group(age)] += 1
    stats.gender = genders
    stats.age_groups = ages

    complaints = Counter(
        p.present_complain.strip() for p in prescriptions
        if p.present_complain and p.present_complain.strip()
    )
    stats.conditions = [NamedCount(name=name, count=count) for name, count in _top(complaints)]
    stats.follow_up = sum(1 for p in prescriptions if p.paid_for in REVIEW_PAID_FOR)
    stats.average_per_day = round(stats.total / days, 2) if days else 0
    return stats

def _revenue_stats(
    prescriptions: List[Prescription],
    medicine_dispenses: List[MedicineDispenseRecord],
    optical_dispenses: List[OpticalDispenseRecord],
    operations: List[Operation],
    labs: List[LabRecord],
) -> RevenueStats:
    stats = RevenueStats(
        consultations=sum(_amount(p.amount_received) for p in prescriptions),
        medicines=sum(_amount(r.total_amount) for r in medicine_dispenses),
        opticals=sum(_optical_revenue(r) for r in optical_dispenses),
        operations=sum(_amount(o.total_amount) for o in operations),
        labs=sum(_amount(l.amount_received) for l in labs if l.type == LabType.REGULAR.value),
        vlabs=sum(_amount(l.vamount_received) for l in labs if l.type == LabType.VANNELA.value),
        pending=sum(_amount(p.amount_due) for p in prescriptions if _amount(p.amount_due) > 0),
    )
    stats.total = (
        stats.consultations + stats.medicines + stats.opticals
        + stats.operations + stats.labs + stats.vlabs
    )
    return stats

def _receipt_stats(prescriptions: List[Prescription]) -> ReceiptStats:
    pending = sum(1 for p in prescriptions if _amount(p.amount_due) > 0)
    with_notes = sum(1 for p in prescriptions if (p.present_complain or "").strip() or (p.diagnosis or "").strip())
    return ReceiptStats(
        total=len(prescriptions),
        completed=len(prescriptions) - pending,
        pending=pending,
        prescriptions=with_notes,
    )

def _medicine_stats(dispenses: List[MedicineDispenseRecord], stock: List[Medicine]) -> MedicineStats:
    quantities = Counter()
    for record in dispenses:
        quantities[record.medicine_name] += record.quantity or 0

    out_of_stock = sum(1 for m in stock if m.status == StockStatus.OUT_OF_STOCK.value)
    low_stock = sum(
        1 for m in stock
        if m.status != StockStatus.OUT_OF_STOCK.value and (m.quantity or 0) < settings.low_stock_threshold
    )
    return MedicineStats(
        total_dispensed=sum(quantities.values()),
        top_medicines=[NamedQuantity(name=name, quantity=qty) for name, qty in _top(quantities)],
        out_of_stock=out_of_stock,
        low_stock=low_stock,
        revenue=sum(_amount(r.total_amount) for r in dispenses),
    )

def _optical_stats(dispenses: List[OpticalDispenseRecord]) -> OpticalStats:
    brands = Counter()
    for record in dispenses:
        brands[record.brand or "Unknown"] += record.quantity or 0
    return OpticalStats(
        total_dispensed=sum(r.quantity or 0 for r in dispenses),
        frames=sum(r.quantity or 0 for r in dispenses if r.optical_type == OpticalType.FRAME.value),
        lenses=sum(r.quantity or 0 for r in dispenses if r.optical_type == OpticalType.LENS.value),
        revenue=sum(_optical_revenue(r) for r in dispenses),
        top_brands=[NamedQuantity(name=name, quantity=qty) for name, qty in _top(brands)],
    )

def _treatment_stats(operations: List[Operation], end: date) -> TreatmentStats:
    total = len(operations)
    discharged = sum(1 for o in operations if o.date_of_discharge)

    hours = Counter()
    for operation in operations:
        hour = parse_hour(operation.time_of_operation)
        if hour is None:
            hour = parse_hour(operation.time_of_admit)
        if hour is not None:
            hours[hour] += 1

    return TreatmentStats(
        completed_treatments=total,
        ongoing_treatments=total - discharged,
        follow_ups=sum(1 for o in operations if o.review_on and o.review_on > end),
        success_rate=round(discharged / total * 100, 1) if total else 0,
        peak_hours=[HourCount(hour=f"{hour:02d}:00", count=hours[hour]) for hour in sorted(hours)],
    )

def _time_series(
    start: date,
    end: date,
    patients: List[Patient],
    prescriptions: List[Prescription],
    medicine_dispenses: List[MedicineDispenseRecord],
    optical_dispenses: List[OpticalDispenseRecord],
    operations: List[Operation],
    labs: List[LabRecord],
) -> List[TimeSeriesPoint]:
    buckets: Dict[date, TimeSeriesPoint] = {day: TimeSeriesPoint(date=day) for day in days_in_range(start, end)}
    revenue: Dict[date, float] = defaultdict(float)

    for patient in patients:
        if patient.date in buckets:
            buckets[patient.date].patients += 1
    for prescription in prescriptions:
        revenue[prescription.date] += _amount(prescription.amount_received)
    for record in medicine_dispenses:
        day = to_local_date(record.dispensed_date)
        if day in buckets:
            buckets[day].medicines += record.quantity or 0
            revenue[day] += _amount(record.total_amount)
    for record in optical_dispenses:
        day = to_local_date(record.dispensed_at)
        if day in buckets:
            buckets[day].opticals += record.quantity or 0
            revenue[day] += _optical_revenue(record)
    for operation in operations:
        revenue[operation.date_of_operation or operation.date_of_admit] += _amount(operation.total_amount)
    for lab in labs:
        if lab.date not in buckets:
            continue
        if lab.type == LabType.VANNELA.value:
            amount = _amount(lab.vamount_received)
            buckets[lab.date].vlabs += amount
        else:
            amount = _amount(lab.amount_received)
            buckets[lab.date].labs += amount
        revenue[lab.date] += amount

    for day, point in buckets.items():
        point.revenue = revenue.get(day, 0.0)
    return list(buckets.values())


def generate_analytics(db: Session, start=None, end=None) -> AnalyticsData:
    """
    Build the analytics dashboard for an inclusive date range.

    Args:
        db: Database session
        start: First day (date or YYYY-MM-DD); defaults to 29 days before end
        end: Last day (date or YYYY-MM-DD); defaults to today

    Returns:
        AnalyticsData with every section populated (zeros where a source failed)

    Raises:
        ValidationFailedException: If a bound is malformed or start is after end
    """
    start_date, end_date = resolve_range(start, end)
    days = (end_date - start_date).days + 1
    failed: List[str] = []

    patients = _safe_fetch(db, "patients", _fetch_patients, start_date, end_date, failed)
    prescriptions = _safe_fetch(db, "prescriptions", _fetch_prescriptions, start_date, end_date, failed)
    medicine_dispenses = _safe_fetch(db, "medicine_dispenses", _fetch_medicine_dispenses, start_date, end_date, failed)
    optical_dispenses = _safe_fetch(db, "optical_dispenses", _fetch_optical_dispenses, start_date, end_date, failed)
    operations = _safe_fetch(db, "operations", _fetch_operations, start_date, end_date, failed)
    labs = _safe_fetch(db, "labs", _fetch_labs, start_date, end_date, failed)
    stock = _safe_fetch(db, "medicine_stock", _fetch_medicine_stock, start_date, end_date, failed)

    data = AnalyticsData(
        start_date=start_date,
        end_date=end_date,
        patient_stats=_patient_stats(patients, prescriptions, end_date, days),
        revenue_stats=_revenue_stats(prescriptions, medicine_dispenses, optical_dispenses, operations, labs),
        receipt_stats=_receipt_stats(prescriptions),
        medicine_stats=_medicine_stats(medicine_dispenses, stock),
        optical_stats=_optical_stats(optical_dispenses),
        treatment_stats=_treatment_stats(operations, end_date),
        time_series=_time_series(
            start_date, end_date, patients, prescriptions,
            medicine_dispenses, optical_dispenses, operations, labs
        ),
        failed_sources=failed,
    )
    logger.info(
        f"Analytics generated for {start_date} to {end_date}: "
        f"{data.patient_stats.total} patients, revenue {data.revenue_stats.total:.2f}"
    )
    return data
