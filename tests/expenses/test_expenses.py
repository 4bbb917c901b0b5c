"""
Tests for clinic expenses.
"""
from datetime import date

import pytest
from pydantic import ValidationError

from clinicdesk.core.dates import clinic_today
from clinicdesk.exceptions import RecordNotFoundException, ValidationFailedException
from clinicdesk.expenses import service
from clinicdesk.expenses.schemas import ExpenseCreate, ExpenseUpdate


def make_expense(db, **overrides):
    data = {"title": "Printer paper", "amount": 450, "category": "Stationary", "date": "2024-03-02"}
    data.update(overrides)
    return service.add_expense(db, ExpenseCreate(**data))


def test_amount_sent_as_text_is_stored_as_number(db):
    expense = make_expense(db, amount="1,250.50")

    assert expense.amount == 1250.5
    assert isinstance(expense.amount, float)


def test_amount_must_be_numeric_and_not_negative():
    with pytest.raises(ValidationError):
        ExpenseCreate(title="Tea", amount="abc", category="Other")
    with pytest.raises(ValidationError):
        ExpenseCreate(title="Tea", amount=-5, category="Other")


def test_date_defaults_to_today(db):
    expense = service.add_expense(db, ExpenseCreate(title="Mop", amount=120, category="House Keeping"))
    assert expense.date == clinic_today()


def test_required_fields(db):
    with pytest.raises(ValidationFailedException) as exc_info:
        service.add_expense(db, ExpenseCreate(title="Rent", amount="  "))
    assert "amount" in exc_info.value.detail
    assert "category" in exc_info.value.detail


def test_unknown_fields_kept_in_extension_map(db):
    expense = make_expense(db, paidTo="Sri Stationers")
    assert expense.extra == {"paidTo": "Sri Stationers"}


def test_date_range_is_inclusive(db):
    make_expense(db, title="Before", date="2024-02-29")
    first = make_expense(db, title="First", date="2024-03-01")
    last = make_expense(db, title="Last", date="2024-03-03")
    make_expense(db, title="After", date="2024-03-04")

    found = service.get_expenses_by_date_range(db, "2024-03-01", date(2024, 3, 3))
    assert [e.id for e in found] == [last.id, first.id]


def test_date_range_validation(db):
    with pytest.raises(ValidationFailedException) as exc_info:
        service.get_expenses_by_date_range(db, "03/01/2024", "2024-03-03")
    assert exc_info.value.detail == "Invalid date format. Use YYYY-MM-DD"

    with pytest.raises(ValidationFailedException):
        service.get_expenses_by_date_range(db, "2024-03-05", "2024-03-01")


def test_category_match_ignores_case(db):
    salary = make_expense(db, title="March salary", category="Salaries", amount=15000)
    make_expense(db)

    assert [e.id for e in service.get_expenses_by_category(db, "salaries")] == [salary.id]
    with pytest.raises(ValidationFailedException):
        service.get_expenses_by_category(db, " ")


def test_update_and_delete(db):
    expense = make_expense(db)

    updated = service.update_expense(db, expense.id, ExpenseUpdate(amount="500", reason="Bulk order"))
    assert updated.amount == 500
    assert updated.reason == "Bulk order"
    assert updated.title == "Printer paper"

    with pytest.raises(ValidationFailedException):
        service.update_expense(db, expense.id, ExpenseUpdate(title=""))
    with pytest.raises(ValidationFailedException):
        service.update_expense(db, None, ExpenseUpdate(amount=1))

    service.delete_expense(db, expense.id)
    with pytest.raises(RecordNotFoundException):
        service.get_expense(db, expense.id)


def test_expense_routes(client, admin_headers):
    response = client.post(
        "/api/v1/expenses/",
        json={"title": "Lab reagents", "amount": "900", "category": "Lab", "date": "2024-03-02"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Expense added successfully"
    assert body["data"]["amount"] == 900.0

    response = client.get(
        "/api/v1/expenses/range",
        params={"start_date": "2024-03-01", "end_date": "2024-03-31"},
        headers=admin_headers,
    )
    assert [e["title"] for e in response.json()["data"]] == ["Lab reagents"]

    response = client.get("/api/v1/expenses/category/lab", headers=admin_headers)
    assert len(response.json()["data"]) == 1

    response = client.get("/api/v1/expenses/range", params={"start_date": "bad"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "validation"


def test_expense_routes_require_reports_module(client, staff_headers):
    headers = staff_headers("frontdesk", patients=True)
    response = client.get("/api/v1/expenses/", headers=headers)
    assert response.status_code == 403
    assert response.json()["error"] == "permission_denied"
