"""
Analytics Schemas - Dashboard aggregates and export requests.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
import datetime as dt

class NamedCount(BaseModel):
    name: str
    count: int

class NamedQuantity(BaseModel):
    name: str
    quantity: int

class HourCount(BaseModel):
    hour: str
    count: int

class PatientStats(BaseModel):
    """
    Patient Stats

    Fields:
    - total: Patients registered in range
    - new: Patient numbers seen once in range
    - returning: total - new
    - gender: male / female / other counts
    - age_groups: Counts per age bucket
    - conditions: Most frequent present complaints (top 5)
    - follow_up: Review visits in range
    - average_per_day: total divided by days in range
    """
    total: int = 0
    new: int = 0
    returning: int = 0
    gender: Dict[str, int] = Field(default_factory=lambda: {"male": 0, "female": 0, "other": 0})
    age_groups: Dict[str, int] = Field(default_factory=dict)
    conditions: List[NamedCount] = Field(default_factory=list)
    follow_up: int = 0
    average_per_day: float = 0

class RevenueStats(BaseModel):
    total: float = 0
    consultations: float = 0
    medicines: float = 0
    opticals: float = 0
    operations: float = 0
    labs: float = 0
    vlabs: float = 0
    pending: float = 0

class ReceiptStats(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    prescriptions: int = 0

class MedicineStats(BaseModel):
    total_dispensed: int = 0
    top_medicines: List[NamedQuantity] = Field(default_factory=list)
    out_of_stock: int = 0
    low_stock: int = 0
    revenue: float = 0

class OpticalStats(BaseModel):
    total_dispensed: int = 0
    frames: int = 0
    lenses: int = 0
    revenue: float = 0
    top_brands: List[NamedQuantity] = Field(default_factory=list)

class TreatmentStats(BaseModel):
    """
    Treatment Stats (operations in range)

    Fields:
    - completed_treatments: Operations in range
    - ongoing_treatments: Operations without a discharge date
    - follow_ups: Operations with a review date after the range
    - success_rate: Discharged share of operations, in percent
    - peak_hours: Operations / admissions per recorded hour of day
    """
    completed_treatments: int = 0
    ongoing_treatments: int = 0
    follow_ups: int = 0
    success_rate: float = 0
    peak_hours: List[HourCount] = Field(default_factory=list)

class TimeSeriesPoint(BaseModel):
    date: dt.date
    patients: int = 0
    revenue: float = 0
    medicines: int = 0
    opticals: int = 0
    labs: float = 0
    vlabs: float = 0

class AnalyticsData(BaseModel):
    start_date: dt.date
    end_date: dt.date
    patient_stats: PatientStats = Field(default_factory=PatientStats)
    revenue_stats: RevenueStats = Field(default_factory=RevenueStats)
    receipt_stats: ReceiptStats = Field(default_factory=ReceiptStats)
    medicine_stats: MedicineStats = Field(default_factory=MedicineStats)
    optical_stats: OpticalStats = Field(default_factory=OpticalStats)
    treatment_stats: TreatmentStats = Field(default_factory=TreatmentStats)
    time_series: List[TimeSeriesPoint] = Field(default_factory=list)
    failed_sources: List[str] = Field(default_factory=list)

class ExportRequest(BaseModel):
    """
    Analytics Export Request

    Fields:
    - section: overview, trends or suggestions
    - format: excel, csv or pdf
    - start_date, end_date: Range (defaults to the last 30 days)
    """
    section: str = "overview"
    format: str = "excel"
    start_date: Optional[str] = None
    end_date: Optional[str] = None

class ExportResult(BaseModel):
    file_path: str
    section: str
    format: str
    rows: int
