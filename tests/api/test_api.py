from datetime import date

from fakes import bearer
from shelfcure.core.enums import Plan, Role


def test_health(client):
    res = client.get("/api/health")

    assert res.status_code == 200
    assert res.get_json() == {"success": True, "data": {"status": "ok"}}


def test_register_then_login_and_me(client):
    res = client.post(
        "/api/auth/register",
        json={"name": "Owner", "email": "new@shop.in", "password": "secret1", "role": "store_owner"},
    )
    assert res.status_code == 201
    assert res.get_json()["message"] == "User registered successfully"

    res = client.post("/api/auth/login", json={"email": "NEW@shop.in", "password": "secret1"})
    body = res.get_json()
    assert res.status_code == 200
    assert "password_hash" not in body["data"]["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['data']['token']}"})
    assert me.get_json()["data"]["role"] == "store_owner"


def test_validation_errors_use_the_failure_envelope(client):
    res = client.post("/api/auth/register", json={"name": "", "email": "bad", "password": "1"})

    body = res.get_json()
    assert res.status_code == 400
    assert body["success"] is False
    assert body["message"] == "Validation Error"
    assert len(body["errors"]) == 3


def test_locked_account_returns_423(client, owner):
    for _ in range(5):
        assert client.post("/api/auth/login", json={"email": owner.email, "password": "nope"}).status_code == 401

    res = client.post("/api/auth/login", json={"email": owner.email, "password": "secret123"})
    assert res.status_code == 423


def test_missing_or_bad_token_is_401(client):
    assert client.get("/api/auth/me").status_code == 401
    res = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401
    assert res.get_json()["message"] == "Not authorized to access this route"


def test_token_cookie_is_accepted(client, container, owner):
    client.set_cookie("token", container.auth_service.issue_token(owner))

    assert client.get("/api/auth/me").status_code == 200


def test_wrong_role_is_403(client, manager_headers, owner_headers):
    res = client.get("/api/store-owner/stores", headers=manager_headers)
    assert res.status_code == 403
    assert res.get_json()["message"] == "User role store_manager is not authorized to access this route"

    res = client.get("/api/store-manager/staff", headers=owner_headers)
    assert res.status_code == 403
    assert res.get_json()["message"] == "Access denied. Store manager role required."


def test_manager_routes_need_an_active_owner_subscription(client, container, owner, manager_headers):
    container.subscription_service.cancel(owner.user_id)

    res = client.get("/api/store-manager/staff", headers=manager_headers)

    assert res.status_code == 403
    assert "Store subscription is not active" in res.get_json()["message"]


def test_owner_store_lifecycle(client, owner_headers, owner, store):
    listed = client.get("/api/store-owner/stores", headers=owner_headers).get_json()
    assert listed["count"] == 1
    assert listed["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}

    res = client.get(f"/api/store-owner/stores/{store.store_id}", headers=owner_headers)
    assert res.get_json()["data"]["statistics"]["staffCount"] == 0

    res = client.post(
        "/api/store-owner/stores",
        headers=owner_headers,
        json={
            "name": "Second",
            "phone": "9876543210",
            "street": "1st Main",
            "city": "Pune",
            "state": "MH",
            "pincode": "411001",
            "licenseNumber": "MH-1",
        },
    )
    # The fixture store was added directly; the basic plan still has its one slot.
    assert res.status_code == 201
    assert res.get_json()["data"]["code"] == "ST0002"

    res = client.post("/api/store-owner/stores", headers=owner_headers, json={"name": "Third"})
    assert res.status_code == 400

    assert client.get("/api/store-owner/stores/999", headers=owner_headers).status_code == 404


def test_duplicate_license_reports_field(client, owner_headers, store, container, owner):
    container.subscription_service.subscribe(owner.user_id, plan=Plan.STANDARD)

    res = client.post(
        "/api/store-owner/stores",
        headers=owner_headers,
        json={
            "name": "Clone",
            "phone": "9876543210",
            "street": "x",
            "city": "y",
            "state": "z",
            "pincode": "560001",
            "licenseNumber": store.license_number,
        },
    )

    body = res.get_json()
    assert res.status_code == 400
    assert body["field"] == "licenseNumber"


def test_staff_attendance_and_payroll_flow(client, manager_headers, manager):
    res = client.post(
        "/api/store-manager/staff",
        headers=manager_headers,
        json={
            "name": "Asha",
            "email": "asha@shop.in",
            "phone": "9876543210",
            "role": "pharmacist",
            "department": "pharmacy",
            "dateOfJoining": "2025-01-01",
            "salary": 18000,
            "workingHours": "full_time",
        },
    )
    assert res.status_code == 201
    staff_id = res.get_json()["data"]["id"]
    assert res.get_json()["data"]["employeeId"] == "PH001"

    listed = client.get("/api/store-manager/staff", headers=manager_headers).get_json()
    assert {m["role"] for m in listed["data"]} == {"store_manager", "pharmacist"}
    assert listed["data"][0]["email"] == manager.email

    today = date.today()
    res = client.post(
        "/api/store-manager/attendance/mark",
        headers=manager_headers,
        json={"staffId": staff_id, "date": today.isoformat(), "status": "present", "checkIn": "09:00", "checkOut": "17:00"},
    )
    assert res.status_code == 200
    assert res.get_json()["message"] == "Attendance marked as present for Asha"
    assert res.get_json()["data"]["actualHours"] == 8

    stats = client.get("/api/store-manager/attendance/stats", headers=manager_headers).get_json()
    assert stats["date"] == today.isoformat()
    assert stats["data"]["present"] == 1

    res = client.post("/api/store-manager/payroll/process", headers=manager_headers, json={})
    result = res.get_json()["data"]
    assert res.status_code == 200
    assert [s["staffId"] for s in result["successful"]] == [staff_id]
    assert result["errors"][0]["error"] == "Salary configuration not found"

    payroll_id = result["successful"][0]["payrollId"]
    res = client.put(
        f"/api/store-manager/payroll/{payroll_id}/status",
        headers=manager_headers,
        json={"status": "paid", "paymentMethod": "cash"},
    )
    assert res.get_json()["data"]["paymentStatus"] == "paid"

    slip = client.get(f"/api/store-manager/payroll/{payroll_id}/payslip", headers=manager_headers)
    assert slip.status_code == 200


def test_staff_not_in_store_is_404(client, manager_headers):
    res = client.get("/api/store-manager/staff/999", headers=manager_headers)

    assert res.status_code == 404
    assert res.get_json() == {"success": False, "message": "Staff member not found"}


def test_owner_payroll_summary(client, owner_headers, container, owner):
    res = client.get("/api/store-owner/payroll/summary", headers=owner_headers)

    assert res.status_code == 200
    assert res.get_json()["data"]["storeWise"] == []


def test_plans_are_public(client):
    plans = client.get("/api/subscriptions/plans").get_json()["data"]

    assert [p["plan"] for p in plans] == ["basic", "standard", "premium", "enterprise"]


def test_store_owner_creates_manager_login(client, owner_headers, store, container):
    res = client.post(
        f"/api/store-owner/stores/{store.store_id}/users",
        headers=owner_headers,
        json={"name": "Mina", "email": "mina@shop.in", "role": "store_manager", "password": "secret1"},
    )

    assert res.status_code == 201
    mina = container.users_repo.get_by_email("mina@shop.in")
    assert mina.role == Role.STORE_MANAGER
    assert client.get("/api/store-manager/staff", headers=bearer(container, mina)).status_code == 200
