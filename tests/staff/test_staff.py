"""
Tests for staff accounts, login and module permissions.
"""
import pytest

from clinicdesk.exceptions import (
    ConflictException,
    InvalidCredentialsException,
    ValidationFailedException,
)
from clinicdesk.core.audit_models import AuditLog
from clinicdesk.core.security import verify_password
from clinicdesk.staff import service
from clinicdesk.staff.schemas import StaffCreate, StaffUpdate


def make_staff(db, username="nurse", **overrides):
    data = {"username": username, "password": "secret", "full_name": "Nurse Joy"}
    data.update(overrides)
    return service.add_staff(db, StaffCreate(**data))


def test_add_staff_hashes_password_and_flattens_permissions(db):
    staff = make_staff(db, permissions={"patients": True, "labs": False})

    assert staff.username == "nurse"
    assert staff.password_hash != "secret"
    assert verify_password("secret", staff.password_hash)
    assert staff.perm_patients is True
    assert staff.permissions["patients"] is True
    assert staff.permissions["labs"] is False


def test_unknown_fields_go_to_extra(db):
    staff = make_staff(db, shift="night")
    assert staff.extra == {"shift": "night"}


def test_usernames_are_unique_ignoring_case(db):
    make_staff(db, username="nurse")
    with pytest.raises(ConflictException):
        make_staff(db, username="  NURSE ")


def test_login_is_case_insensitive_and_audited(db):
    make_staff(db, username="nurse")

    result = service.login(db, "Nurse", "secret")

    assert result["access_token"]
    assert result["token_type"] == "bearer"
    assert result["user"].username == "nurse"
    assert db.query(AuditLog).filter(AuditLog.action == "STAFF_LOGIN_SUCCESS").count() == 1


def test_login_with_wrong_password_fails(db):
    make_staff(db)
    with pytest.raises(InvalidCredentialsException) as exc_info:
        service.login(db, "nurse", "wrong")
    assert exc_info.value.detail == "Invalid username or password"
    assert db.query(AuditLog).filter(AuditLog.action == "STAFF_LOGIN_FAILED").count() == 1


def test_update_staff_rehashes_new_password(db):
    staff = make_staff(db)
    updated = service.update_staff(db, staff.id, StaffUpdate(password="changed", position="Head Nurse"))

    assert updated.position == "Head Nurse"
    assert verify_password("changed", updated.password_hash)


def test_last_administrator_cannot_be_deleted(db):
    admin = make_staff(db, username="boss", is_admin=True)

    with pytest.raises(ValidationFailedException) as exc_info:
        service.delete_staff(db, admin.id)
    assert exc_info.value.detail == "Cannot delete the last administrator"


def test_staff_permission_counts_as_administrator(db):
    admin = make_staff(db, username="boss", is_admin=True)
    make_staff(db, username="manager", permissions={"staff": True})

    assert service.count_administrators(db) == 2
    assert service.delete_staff(db, admin.id) == admin.id


def test_reset_password_returns_new_working_password(db):
    staff = make_staff(db)
    new_password = service.reset_staff_password(db, staff.id)

    assert len(new_password) == 8
    assert service.login(db, "nurse", new_password)["user"].id == staff.id


def test_check_permission(db):
    staff = make_staff(db, permissions={"medicines": True})

    assert service.check_permission(db, staff.id, "medicines")["has_access"] is True
    assert service.check_permission(db, staff.id, "analytics")["has_access"] is False
    with pytest.raises(ValidationFailedException):
        service.check_permission(db, staff.id, "nope")


def test_login_route_returns_envelope(client, admin):
    response = client.post("/api/v1/staff/login", json={"username": "ADMIN", "password": "admin-pass"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["username"] == "admin"
    assert "password_hash" not in body["data"]["user"]


def test_login_route_rejects_bad_credentials(client, admin):
    response = client.post("/api/v1/staff/login", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["error"] == "invalid_credentials"


def test_me_returns_session_owner(client, admin_headers):
    response = client.get("/api/v1/staff/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["username"] == "admin"


def test_staff_module_is_required_to_manage_staff(client, staff_headers):
    headers = staff_headers("reception", patients=True)
    response = client.get("/api/v1/staff/", headers=headers)
    assert response.status_code == 403
    assert response.json()["error"] == "permission_denied"


def test_admin_manages_staff_over_api(client, admin_headers):
    response = client.post("/api/v1/staff/", json={
        "username": "pharma",
        "password": "pw",
        "full_name": "Pharmacist",
        "permissions": {"medicines": True},
    }, headers=admin_headers)
    assert response.status_code == 201
    staff_id = response.json()["data"]["id"]

    response = client.get("/api/v1/staff/", headers=admin_headers)
    assert {s["username"] for s in response.json()["data"]} == {"admin", "pharma"}

    response = client.delete(f"/api/v1/staff/{staff_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"] == staff_id


def test_last_administrator_cannot_be_demoted(db):
    admin = make_staff(db, username="boss", is_admin=True)

    with pytest.raises(ValidationFailedException) as exc_info:
        service.update_staff(db, admin.id, StaffUpdate(is_admin=False))
    assert exc_info.value.detail == "Cannot remove rights from the last administrator"
    assert service.count_administrators(db) == 1
    assert service.get_staff(db, admin.id).is_admin is True


def test_administrator_can_be_demoted_while_another_remains(db):
    admin = make_staff(db, username="boss", is_admin=True)
    make_staff(db, username="deputy", is_admin=True)

    updated = service.update_staff(db, admin.id, StaffUpdate(is_admin=False))
    assert updated.is_admin is False
    assert service.count_administrators(db) == 1
