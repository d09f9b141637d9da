"""
End-to-end tests for the HTTP API, run through FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from garage_tracker.core.rate_limit import RATE_LIMITS, limiter
from garage_tracker.core.setting import Settings, settings
from garage_tracker.core.tokens import SessionClaim, SessionTokenCodec
from garage_tracker.main import create_app

from conftest import TEST_SECRET


JANE = {
    "owner_name": "Jane",
    "phone": "555",
    "vehicle_number": "AB123",
    "make": "Honda",
    "model": "City",
    "last_service_date": "2024-01-01",
    "next_service_date": "2024-01-02",
}

RAVI = {
    "owner_name": "Ravi Kumar",
    "phone": "98450 12345",
    "vehicle_number": "KA-01-XY-9988",
    "make": "Toyota",
    "model": "Corolla",
    "last_service_date": "2024-05-01",
    "next_service_date": "2024-06-18",
    "notes": "Brake pads at 40%",
}


def create_vehicle(client, headers, fields=JANE) -> dict:
    response = client.post("/api/vehicles", json=fields, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def list_vehicles(client, headers, **params) -> list:
    response = client.get("/api/vehicles", headers=headers, params=params)
    assert response.status_code == 200, response.text
    return response.json()


class TestAuthEndpoints:
    """Test signup and login."""

    def test_signup_returns_token_and_user(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"email": "a@x.com", "password": "pw123", "garageName": "Bob's Garage"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"] == {"email": "a@x.com", "garageName": "Bob's Garage"}
        claim = SessionTokenCodec(TEST_SECRET).verify(data["token"])
        assert claim.email == "a@x.com"
        assert claim.garage_name == "Bob's Garage"

    def test_signup_accepts_snake_case_garage_name(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"email": "a@x.com", "password": "pw123", "garage_name": "Bob's Garage"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["garageName"] == "Bob's Garage"

    def test_duplicate_signup(self, client, signup):
        signup()
        response = client.post(
            "/api/auth/signup",
            json={"email": "a@x.com", "password": "other", "garageName": "Other Garage"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Email already exists"}

        # The original password still works
        login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw123"})
        assert login.status_code == 200
        assert login.json()["user"]["garageName"] == "Bob's Garage"

    def test_signup_missing_field(self, client):
        response = client.post("/api/auth/signup", json={"email": "a@x.com", "password": "pw123"})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_login_success(self, client, signup):
        signup()
        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw123"})

        assert response.status_code == 200
        data = response.json()
        assert data["user"] == {"email": "a@x.com", "garageName": "Bob's Garage"}
        assert SessionTokenCodec(TEST_SECRET).verify(data["token"]).email == "a@x.com"

    def test_login_failures_are_indistinguishable(self, client, signup):
        signup()
        wrong_password = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope"})
        unknown_email = client.post("/api/auth/login", json={"email": "ghost@x.com", "password": "pw123"})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"error": "Invalid credentials"}

    def test_login_email_is_case_sensitive(self, client, signup):
        signup()
        response = client.post("/api/auth/login", json={"email": "A@X.COM", "password": "pw123"})
        assert response.status_code == 401


class TestAccessGate:
    """Test that record endpoints require a valid bearer token."""

    def test_missing_token(self, client):
        response = client.get("/api/vehicles")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_wrong_scheme(self, client, signup):
        token = signup()["Authorization"].split(" ", 1)[1]
        response = client.get("/api/vehicles", headers={"Authorization": f"Basic {token}"})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/vehicles", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}

    def test_token_from_other_secret_mutates_nothing(self, client, signup):
        headers = signup()
        forged = SessionTokenCodec("some-other-secret-nobody-should-trust").issue(
            SessionClaim(account_id=1, email="a@x.com", garage_name="Bob's Garage")
        )
        forged_headers = {"Authorization": f"Bearer {forged}"}

        assert client.post("/api/vehicles", json=JANE, headers=forged_headers).status_code == 401
        assert list_vehicles(client, headers) == []

    def test_unauthenticated_update_and_delete_mutate_nothing(self, client, signup):
        headers = signup()
        record = create_vehicle(client, headers)

        assert client.put(f"/api/vehicles/{record['id']}", json=RAVI).status_code == 401
        assert client.delete(f"/api/vehicles/{record['id']}").status_code == 401

        (still_there,) = list_vehicles(client, headers)
        assert still_there["owner_name"] == "Jane"


class TestVehicleEndpoints:
    """Test record CRUD, search and summary."""

    def test_create_then_list(self, client, signup):
        headers = signup()
        created = create_vehicle(client, headers)

        assert created["id"] >= 1
        assert created["status"] == "overdue"
        assert {k: created[k] for k in JANE} == JANE
        assert created["notes"] is None

        records = list_vehicles(client, headers)
        assert len(records) == 1
        assert records[0]["vehicle_number"] == "AB123"
        assert records[0] == created

    def test_status_uses_today(self, client, signup):
        headers = signup()
        # today is pinned to 2024-06-15 by the app fixture
        upcoming = create_vehicle(client, headers, RAVI)
        scheduled = create_vehicle(client, headers, {**RAVI, "next_service_date": "2024-07-15"})
        due_today = create_vehicle(client, headers, {**RAVI, "next_service_date": "2024-06-15"})

        assert upcoming["status"] == "upcoming"
        assert scheduled["status"] == "scheduled"
        assert due_today["status"] == "upcoming"

    def test_list_newest_first(self, client, signup):
        headers = signup()
        first = create_vehicle(client, headers, JANE)
        second = create_vehicle(client, headers, RAVI)

        assert [r["id"] for r in list_vehicles(client, headers)] == [second["id"], first["id"]]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("last_service_date", "2024-13-01"),
            ("next_service_date", "02/01/2024"),
            ("next_service_date", "2024-01-02T09:00:00"),
        ],
    )
    def test_create_rejects_bad_dates(self, client, signup, field, value):
        headers = signup()
        response = client.post("/api/vehicles", json={**JANE, field: value}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"
        assert list_vehicles(client, headers) == []

    def test_create_rejects_missing_field(self, client, signup):
        headers = signup()
        body = {k: v for k, v in JANE.items() if k != "make"}
        response = client.post("/api/vehicles", json=body, headers=headers)

        assert response.status_code == 400
        assert response.json()["details"][0]["loc"][-1] == "make"

    def test_update(self, client, signup):
        headers = signup()
        record = create_vehicle(client, headers, RAVI)

        response = client.put(f"/api/vehicles/{record['id']}", json=JANE, headers=headers)
        assert response.status_code == 200
        assert response.json() == {"success": True}

        (updated,) = list_vehicles(client, headers)
        assert updated["id"] == record["id"]
        assert updated["owner_name"] == "Jane"
        # Full overwrite: notes omitted from the body are cleared
        assert updated["notes"] is None

    def test_delete(self, client, signup):
        headers = signup()
        record = create_vehicle(client, headers)

        response = client.delete(f"/api/vehicles/{record['id']}", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert list_vehicles(client, headers) == []

    def test_update_and_delete_of_missing_record(self, client, signup):
        headers = signup()

        update = client.put("/api/vehicles/9999", json=JANE, headers=headers)
        delete = client.delete("/api/vehicles/9999", headers=headers)

        assert update.status_code == delete.status_code == 404
        assert update.json() == delete.json() == {"error": "Vehicle not found"}

    def test_update_and_delete_of_id_beyond_integer_range(self, client, signup):
        headers = signup()
        record = create_vehicle(client, headers)
        huge_id = "99999999999999999999"

        update = client.put(f"/api/vehicles/{huge_id}", json=RAVI, headers=headers)
        delete = client.delete(f"/api/vehicles/{huge_id}", headers=headers)

        assert update.status_code == delete.status_code == 404
        assert update.json() == delete.json() == {"error": "Vehicle not found"}
        assert list_vehicles(client, headers) == [record]

    def test_non_integer_record_id(self, client, signup):
        headers = signup()
        response = client.delete("/api/vehicles/abc", headers=headers)
        assert response.status_code == 400

    def test_search(self, client, signup):
        headers = signup()
        create_vehicle(client, headers, JANE)
        create_vehicle(client, headers, RAVI)

        assert [r["owner_name"] for r in list_vehicles(client, headers, search="RAVI")] == ["Ravi Kumar"]
        assert [r["owner_name"] for r in list_vehicles(client, headers, search="ab12")] == ["Jane"]
        assert [r["owner_name"] for r in list_vehicles(client, headers, search="50 12")] == ["Ravi Kumar"]
        assert list_vehicles(client, headers, search="corolla") == []
        assert len(list_vehicles(client, headers, search="")) == 2

    def test_search_ignores_case_beyond_ascii(self, client, signup):
        headers = signup()
        create_vehicle(client, headers, {**JANE, "owner_name": "ÉLODIE", "vehicle_number": "ÄB-1"})
        create_vehicle(client, headers, RAVI)

        assert [r["owner_name"] for r in list_vehicles(client, headers, search="élodie")] == ["ÉLODIE"]
        assert [r["vehicle_number"] for r in list_vehicles(client, headers, search="äb")] == ["ÄB-1"]

    def test_summary(self, client, signup):
        headers = signup()
        create_vehicle(client, headers, JANE)
        create_vehicle(client, headers, RAVI)
        create_vehicle(client, headers, {**RAVI, "next_service_date": "2024-09-01"})

        response = client.get("/api/vehicles/summary", headers=headers)

        assert response.status_code == 200
        assert response.json() == {
            "total": 3,
            "overdue": 1,
            "upcoming": 1,
            "scheduled": 1,
            "top_makes": [
                {"name": "Toyota", "value": 2},
                {"name": "Honda", "value": 1},
            ],
        }

    def test_summary_requires_token(self, client):
        assert client.get("/api/vehicles/summary").status_code == 401


class TestTenantIsolation:
    """Test that one garage can never see or touch another garage's records."""

    def test_list_is_scoped_to_caller(self, client, signup):
        garage_a = signup("a@x.com")
        garage_b = signup("b@x.com", garage_name="B Motors")

        create_vehicle(client, garage_a, JANE)
        create_vehicle(client, garage_b, RAVI)

        assert [r["vehicle_number"] for r in list_vehicles(client, garage_a)] == ["AB123"]
        assert [r["vehicle_number"] for r in list_vehicles(client, garage_b)] == ["KA-01-XY-9988"]

        summary = client.get("/api/vehicles/summary", headers=garage_b).json()
        assert summary["total"] == 1

    def test_cross_tenant_update_and_delete(self, client, signup):
        garage_a = signup("a@x.com")
        garage_b = signup("b@x.com", garage_name="B Motors")
        record = create_vehicle(client, garage_a, JANE)

        update = client.put(f"/api/vehicles/{record['id']}", json=RAVI, headers=garage_b)
        delete = client.delete(f"/api/vehicles/{record['id']}", headers=garage_b)
        missing = client.delete("/api/vehicles/9999", headers=garage_b)

        assert update.status_code == delete.status_code == 404
        # Same answer as for a record that does not exist at all
        assert update.json() == delete.json() == missing.json()

        assert list_vehicles(client, garage_a) == [record]


class TestApplication:
    """Test health endpoints, middleware and app configuration."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Garage Service Tracker"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_process_time_header(self, client):
        assert "X-Process-Time" in client.get("/health").headers

    def test_default_secret_refused_in_production(self, tmp_path):
        production = Settings(
            ENV_SETTING="production",
            DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'prod.db'}",
        )
        with pytest.raises(RuntimeError):
            create_app(production)

    def test_default_secret_allowed_in_development(self, tmp_path):
        development = Settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'dev.db'}")
        assert create_app(development).state.token_codec is not None


class TestRateLimiting:
    """Test slowapi limits on the auth endpoints."""

    @pytest.fixture
    def limited_client(self, tmp_path):
        limited = Settings(
            DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'limited.db'}",
            JWT_SECRET=TEST_SECRET,
            RATE_LIMIT_ENABLED=True,
            LOG_LEVEL="WARNING",
        )
        limiter.reset()
        with TestClient(create_app(limited)) as test_client:
            yield test_client
        limiter.reset()
        limiter.enabled = False

    def test_signup_is_rate_limited(self, limited_client):
        statuses = [
            limited_client.post(
                "/api/auth/signup",
                json={"email": f"user{i}@x.com", "password": "pw123", "garageName": "G"},
            ).status_code
            for i in range(6)
        ]

        assert statuses[:5] == [200] * 5
        assert statuses[5] == 429

    def test_limit_strings_come_from_environment_settings(self, tmp_path):
        custom = Settings(
            DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'custom.db'}",
            JWT_SECRET=TEST_SECRET,
            RATE_LIMIT_ENABLED=False,
            RATE_LIMIT_SIGNUP="1/hour",
        )
        create_app(custom)

        assert RATE_LIMITS["signup"] != "1/hour"
        assert RATE_LIMITS["signup"] == settings.RATE_LIMIT_SIGNUP
        assert RATE_LIMITS["login"] == settings.RATE_LIMIT_LOGIN
        assert RATE_LIMITS["vehicles"] == settings.RATE_LIMIT_VEHICLES
