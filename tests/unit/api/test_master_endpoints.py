"""
Name: Master Data Endpoint Tests (sales persons, customers)

Responsibilities:
  - Any active user reads master data; only admins write it
  - Admin checks use the stored role, not the token claim
  - Duplicate keys map to their dedicated 409 codes
  - Deactivation is soft and locks the account out
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from daily_report.api.exception_handlers import register_exception_handlers
from daily_report.container import get_token_service
from daily_report.identity.users import UserRole
from daily_report.interfaces.api.http.router import API_PREFIX, build_router

pytestmark = pytest.mark.unit

SALES_PERSONS = f"{API_PREFIX}/sales-persons"
CUSTOMERS = f"{API_PREFIX}/customers"
LOGIN = f"{API_PREFIX}/auth/login"


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(build_router(), prefix=API_PREFIX)
    return app


@pytest.fixture
def client(app_roster) -> TestClient:
    return TestClient(_build_app())


def _new_person(**overrides) -> dict:
    body = {
        "employeeCode": "EMP100",
        "name": "New Hire",
        "email": "new.hire@example.com",
        "password": "welcome-123",
        "role": "member",
    }
    body.update(overrides)
    return body


class TestSalesPersons:
    def test_member_can_list(self, client, app_roster, auth_header):
        response = client.get(
            SALES_PERSONS,
            params={"role": "manager"},
            headers=auth_header(app_roster.member),
        )

        assert response.status_code == 200
        names = [p["name"] for p in response.json()["data"]]
        assert names == ["Manager", "Other Manager"]
        assert response.json()["pagination"]["total_count"] == 2

    def test_detail_lists_subordinates(self, client, app_roster, auth_header):
        response = client.get(
            f"{SALES_PERSONS}/{app_roster.manager.id}",
            headers=auth_header(app_roster.admin),
        )

        data = response.json()["data"]
        assert [s["name"] for s in data["subordinates"]] == ["Member", "Peer"]
        assert "password_hash" not in data

    def test_admin_creates_person(self, client, app_roster, auth_header):
        response = client.post(
            SALES_PERSONS,
            json=_new_person(managerId=app_roster.manager.id),
            headers=auth_header(app_roster.admin),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["employee_code"] == "EMP100"
        assert data["manager"] == {"id": app_roster.manager.id, "name": "Manager"}
        assert data["is_active"] is True

    def test_manager_cannot_create(self, client, app_roster, auth_header):
        response = client.post(
            SALES_PERSONS, json=_new_person(), headers=auth_header(app_roster.manager)
        )

        assert response.status_code == 403

    def test_forged_admin_claim_is_not_enough(self, client, app_roster):
        member = app_roster.member
        forged = get_token_service().issue(member.id, member.email, UserRole.ADMIN)

        response = client.post(
            SALES_PERSONS,
            json=_new_person(),
            headers={"Authorization": f"Bearer {forged.token}"},
        )

        assert response.status_code == 403

    @pytest.mark.parametrize(
        "overrides,code",
        [
            ({"employeeCode": "EMP003"}, "DUPLICATE_EMPLOYEE_CODE"),
            ({"email": "peer@example.com"}, "DUPLICATE_EMAIL"),
        ],
    )
    def test_duplicates(self, client, app_roster, auth_header, overrides, code):
        response = client.post(
            SALES_PERSONS,
            json=_new_person(**overrides),
            headers=auth_header(app_roster.admin),
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == code

    @pytest.mark.parametrize(
        "overrides",
        [
            {"password": "short"},
            {"email": "broken"},
            {"employeeCode": "EMP-100"},
            {"role": "owner"},
        ],
    )
    def test_schema_violations(self, client, app_roster, auth_header, overrides):
        response = client.post(
            SALES_PERSONS,
            json=_new_person(**overrides),
            headers=auth_header(app_roster.admin),
        )

        assert response.status_code == 422

    def test_update_changes_role(self, client, app_roster, auth_header):
        response = client.put(
            f"{SALES_PERSONS}/{app_roster.peer.id}",
            json={"name": "Peer", "email": "peer@example.com", "role": "manager"},
            headers=auth_header(app_roster.admin),
        )

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "manager"
        assert response.json()["data"]["manager"] is None

    def test_deactivated_person_is_locked_out(
        self, client, app_roster, auth_header, default_password
    ):
        peer_headers = auth_header(app_roster.peer)

        response = client.delete(
            f"{SALES_PERSONS}/{app_roster.peer.id}",
            headers=auth_header(app_roster.admin),
        )
        login = client.post(
            LOGIN, json={"email": "peer@example.com", "password": default_password}
        )
        with_old_token = client.get(f"{API_PREFIX}/reports", headers=peer_headers)

        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False
        assert login.json()["error"]["code"] == "ACCOUNT_DISABLED"
        assert with_old_token.status_code == 401

    def test_admin_cannot_deactivate_self(self, client, app_roster, auth_header):
        response = client.delete(
            f"{SALES_PERSONS}/{app_roster.admin.id}",
            headers=auth_header(app_roster.admin),
        )

        assert response.status_code == 422


class TestCustomers:
    def test_keyword_search(self, client, app_roster, auth_header):
        response = client.get(
            CUSTOMERS, params={"keyword": "glo"}, headers=auth_header(app_roster.member)
        )

        assert [c["customer_code"] for c in response.json()["data"]] == ["C002"]

    def test_admin_creates_customer(self, client, app_roster, auth_header):
        response = client.post(
            CUSTOMERS,
            json={
                "customerCode": "C010",
                "name": "Initech",
                "address": "1-2-3 Chiyoda",
                "phone": "03-1234-5678",
            },
            headers=auth_header(app_roster.admin),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["customer_code"] == "C010"
        assert data["phone"] == "03-1234-5678"

    def test_duplicate_customer_code(self, client, app_roster, auth_header):
        response = client.post(
            CUSTOMERS,
            json={"customerCode": "C001", "name": "Again"},
            headers=auth_header(app_roster.admin),
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_CUSTOMER_CODE"

    @pytest.mark.parametrize(
        "body",
        [
            {"customerCode": "C-1", "name": "Bad code"},
            {"customerCode": "C011", "name": ""},
            {"customerCode": "C011", "name": "Bad phone", "phone": "12345"},
        ],
    )
    def test_schema_violations(self, client, app_roster, auth_header, body):
        response = client.post(
            CUSTOMERS, json=body, headers=auth_header(app_roster.admin)
        )

        assert response.status_code == 422

    def test_member_cannot_write(self, client, app_roster, auth_header):
        response = client.put(
            f"{CUSTOMERS}/{app_roster.customer_id}",
            json={"name": "Renamed"},
            headers=auth_header(app_roster.member),
        )

        assert response.status_code == 403

    def test_deactivate_customer(self, client, app_roster, auth_header):
        response = client.delete(
            f"{CUSTOMERS}/{app_roster.second_customer_id}",
            headers=auth_header(app_roster.admin),
        )

        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False

    def test_unknown_customer(self, client, app_roster, auth_header):
        response = client.get(f"{CUSTOMERS}/999", headers=auth_header(app_roster.admin))

        assert response.status_code == 404
