"""
Tests for the analytics aggregator and section exports.
"""
import csv
from datetime import date, datetime, timezone

import pytest
from openpyxl import load_workbook

from clinicdesk.analytics import service
from clinicdesk.analytics.export import export_analytics
from clinicdesk.analytics.service import generate_analytics, parse_hour
from clinicdesk.exceptions import UnsupportedFormatException, ValidationFailedException
from clinicdesk.labs.models import LabRecord
from clinicdesk.medicines.models import Medicine, MedicineDispenseRecord
from clinicdesk.operations.models import Operation
from clinicdesk.opticals.models import OpticalDispenseRecord
from clinicdesk.patients.models import Patient
from clinicdesk.prescriptions.models import Prescription

START = date(2024, 3, 1)
END = date(2024, 3, 3)


@pytest.fixture
def clinic_activity(db):
    db.add_all([
        Patient(id="p1", patient_id="101", name="Asha", gender="Female", age=34, date=date(2024, 3, 1)),
        Patient(id="p2", patient_id="102", name="Ravi", gender="M", dob=date(2010, 6, 1), date=date(2024, 3, 2)),
        Patient(id="p3", patient_id="103", name="Anon", date=date(2024, 3, 2)),
        Patient(id="p4", patient_id="999", name="Outside", date=date(2024, 2, 1)),

        Prescription(id="r1", sno=1, receipt_no="R0001", date=date(2024, 3, 1), patient_id="101",
                     amount_received=200, amount_due=0, present_complain="Redness"),
        Prescription(id="r2", sno=2, receipt_no="R0002", date=date(2024, 3, 2), patient_id="102",
                     amount_received=100, amount_due=50, present_complain="Blurred vision",
                     paid_for="REVIEW OP CONSULTATION"),
        Prescription(id="r3", sno=3, receipt_no="R0003", date=date(2024, 3, 2), patient_id="103",
                     amount_received=100, amount_due=0, present_complain="Redness"),

        # 2024-03-01 20:00 UTC is 2024-03-02 01:30 at the clinic
        MedicineDispenseRecord(id="m1", medicine_id="med1", medicine_name="Drops", quantity=2, price=40,
                               total_amount=80, dispensed_date=datetime(2024, 3, 1, 20, 0, tzinfo=timezone.utc)),
        Medicine(id="med1", name="Drops", quantity=3, price=40, status="available"),
        Medicine(id="med2", name="Gel", quantity=0, price=10, status="out_of_stock"),
        Medicine(id="med3", name="Tabs", quantity=50, price=1, status="available"),

        OpticalDispenseRecord(id="o1", optical_id="f1", optical_type="frame", brand="Titan", quantity=1,
                              price=1500, dispensed_at=datetime(2024, 3, 3, 6, 0, tzinfo=timezone.utc)),
        OpticalDispenseRecord(id="o2", optical_id="l1", optical_type="lens", brand="Zeiss", quantity=2,
                              price=500, dispensed_at=datetime(2024, 3, 3, 7, 0, tzinfo=timezone.utc)),

        Operation(id="op1", patient_id="101", date_of_operation=date(2024, 3, 2), time_of_operation="10:30",
                  date_of_discharge=date(2024, 3, 3), total_amount=10000, review_on=date(2024, 3, 20)),
        Operation(id="op2", patient_id="102", date_of_admit=date(2024, 3, 3), time_of_admit="2:15 PM",
                  total_amount=8000),

        LabRecord(id="l1", patient_id="101", date=date(2024, 3, 1), type="regular", amount_received=300),
        LabRecord(id="l2", patient_id="102", date=date(2024, 3, 3), type="vannela", vamount_received=120),
    ])
    db.commit()


def test_empty_range_has_zero_filled_series(db):
    data = generate_analytics(db, START, END)

    assert [point.date for point in data.time_series] == [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)]
    for point in data.time_series:
        assert (point.patients, point.revenue, point.medicines, point.opticals, point.labs, point.vlabs) == (0, 0, 0, 0, 0, 0)
    assert data.patient_stats.total == 0
    assert data.revenue_stats.total == 0
    assert data.revenue_stats.pending == 0
    assert data.receipt_stats.total == 0
    assert data.medicine_stats.total_dispensed == 0
    assert data.optical_stats.total_dispensed == 0
    assert data.failed_sources == []
    assert data.treatment_stats.success_rate == 0
    assert data.treatment_stats.peak_hours == []


def test_start_after_end_is_rejected(db):
    with pytest.raises(ValidationFailedException):
        generate_analytics(db, "2024-03-05", "2024-03-01")


def test_default_range_is_last_thirty_days(db):
    data = generate_analytics(db)
    assert len(data.time_series) == 30
    assert (data.end_date - data.start_date).days == 29


def test_patient_stats(db, clinic_activity):
    stats = generate_analytics(db, START, END).patient_stats

    assert stats.total == 3
    assert stats.new + stats.returning == stats.total
    assert stats.gender == {"male": 1, "female": 1, "other": 1}
    assert stats.age_groups["31 to 45"] == 1
    assert stats.age_groups["under 18"] == 1
    assert [(c.name, c.count) for c in stats.conditions] == [("Redness", 2), ("Blurred vision", 1)]
    assert stats.follow_up == 1
    assert stats.average_per_day == 1.0


def test_revenue_and_receipts(db, clinic_activity):
    data = generate_analytics(db, START, END)
    revenue = data.revenue_stats

    assert revenue.consultations == 400
    assert revenue.medicines == 80
    assert revenue.opticals == 2500
    assert revenue.operations == 18000
    assert revenue.labs == 300
    assert revenue.vlabs == 120
    assert revenue.total == 400 + 80 + 2500 + 18000 + 300 + 120
    assert revenue.pending == 50

    receipts = data.receipt_stats
    assert (receipts.total, receipts.completed, receipts.pending) == (3, 2, 1)


def test_stock_and_optical_stats(db, clinic_activity):
    data = generate_analytics(db, START, END)

    medicines = data.medicine_stats
    assert medicines.total_dispensed == 2
    assert [(m.name, m.quantity) for m in medicines.top_medicines] == [("Drops", 2)]
    assert medicines.out_of_stock == 1
    assert medicines.low_stock == 1

    opticals = data.optical_stats
    assert (opticals.total_dispensed, opticals.frames, opticals.lenses) == (3, 1, 2)
    assert opticals.top_brands[0].name == "Zeiss"


def test_treatment_stats(db, clinic_activity):
    treatment = generate_analytics(db, START, END).treatment_stats

    assert treatment.completed_treatments == 2
    assert treatment.ongoing_treatments == 1
    assert treatment.follow_ups == 1
    assert treatment.success_rate == 50.0
    assert [(h.hour, h.count) for h in treatment.peak_hours] == [("10:00", 1), ("14:00", 1)]


def test_time_series_uses_clinic_local_days(db, clinic_activity):
    series = {point.date: point for point in generate_analytics(db, START, END).time_series}

    assert series[date(2024, 3, 1)].patients == 1
    assert series[date(2024, 3, 1)].medicines == 0
    assert series[date(2024, 3, 2)].medicines == 2
    assert series[date(2024, 3, 3)].opticals == 3
    assert series[date(2024, 3, 1)].labs == 300
    assert series[date(2024, 3, 3)].vlabs == 120
    assert series[date(2024, 3, 1)].revenue == 200 + 300


def test_failed_source_contributes_zeros(db, clinic_activity, monkeypatch):
    def broken(db, start, end):
        raise RuntimeError("sheet unavailable")

    monkeypatch.setattr(service, "_fetch_labs", broken)
    data = generate_analytics(db, START, END)

    assert data.failed_sources == ["labs"]
    assert data.revenue_stats.labs == 0
    assert data.patient_stats.total == 3


def test_parse_hour():
    assert parse_hour("09:45") == 9
    assert parse_hour("12:10 AM") == 0
    assert parse_hour("12:10 pm") == 12
    assert parse_hour("noon") is None
    assert parse_hour(None) is None


def test_export_csv_trends(db, clinic_activity, tmp_path):
    result = export_analytics(db, "trends", START, END, "csv", export_dir=str(tmp_path))

    assert result["section"] == "trends"
    assert result["rows"] == 3
    assert result["file_path"].endswith(".csv")
    with open(result["file_path"], newline="") as fp:
        rows = list(csv.reader(fp))
    assert rows[0] == ["Date", "Patients", "Revenue", "Medicines", "Opticals"]
    assert rows[1][0] == "2024-03-01"


def test_export_excel_overview(db, clinic_activity, tmp_path):
    result = export_analytics(db, "overview", START, END, "excel", export_dir=str(tmp_path))

    assert result["file_path"].endswith(".xlsx")
    ws = load_workbook(result["file_path"]).active
    values = {row[0]: row[1] for row in ws.iter_rows(min_row=2, values_only=True)}
    assert values["Total Patients"] == 3
    assert values["Pending Amount"] == 50


def test_export_suggestions(db, clinic_activity, tmp_path):
    result = export_analytics(db, "suggestions", START, END, "csv", export_dir=str(tmp_path))
    with open(result["file_path"], newline="") as fp:
        rows = {row[0]: row[1] for row in csv.reader(fp)}
    assert rows["Top Condition"] == "Redness (2)"
    assert rows["Treatment Success Rate"] == "50.0%"


def test_pdf_export_is_unsupported(db, tmp_path):
    with pytest.raises(UnsupportedFormatException) as exc_info:
        export_analytics(db, "overview", START, END, "pdf", export_dir=str(tmp_path))
    assert exc_info.value.detail == "PDF export requires additional setup. Please use Excel or CSV format."
    assert list(tmp_path.iterdir()) == []


def test_unknown_section_or_format(db, tmp_path):
    with pytest.raises(ValidationFailedException):
        export_analytics(db, "forecast", START, END, "csv", export_dir=str(tmp_path))
    with pytest.raises(ValidationFailedException):
        export_analytics(db, "overview", START, END, "docx", export_dir=str(tmp_path))


def test_analytics_routes(client, admin_headers, monkeypatch, tmp_path):
    from clinicdesk.config import settings
    monkeypatch.setattr(settings, "export_dir", str(tmp_path))

    response = client.get("/api/v1/analytics/", params={"start_date": "2024-03-01", "end_date": "2024-03-03"},
                          headers=admin_headers)
    assert response.status_code == 200
    assert len(response.json()["data"]["time_series"]) == 3

    response = client.post("/api/v1/analytics/export", json={"section": "overview", "format": "pdf"},
                           headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "unsupported"

    response = client.post("/api/v1/analytics/export", json={"section": "trends", "format": "csv"},
                           headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["rows"] == 30


def test_analytics_requires_module(client, staff_headers):
    headers = staff_headers("desk", patients=True)
    assert client.get("/api/v1/analytics/", headers=headers).status_code == 403
