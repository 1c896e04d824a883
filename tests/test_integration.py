import pytest
from fastapi.testclient import TestClient

from energylink.data.electricians_repository import ELECTRICIANS_TABLE
from energylink.main import create_app
from energylink.persistence.bookings import BOOKINGS_TABLE
from energylink.services.auth import SessionRegistry

RIYADH = {"lat": 24.7136, "lng": 46.6753}


def _seed_directory(supabase) -> None:
    supabase.seed(
        ELECTRICIANS_TABLE,
        {
            "id": "e1",
            "displayName": "Ahmed Hassan",
            "bio": "Residential wiring",
            "specialties": ["Wiring"],
            "hourlyRate": 80,
            "rating": 4.2,
            "location": {"lat": 24.6877, "lng": 46.7219},
        },
        {
            "id": "e2",
            "display_name": "Sara Ali",
            "bio": "Solar installs",
            "specialties": ["Solar Panels"],
            "rating": 4.9,
            "location": {"lat": 24.72, "lng": 46.68},
        },
        {"id": "e3", "name": "Omar", "location": {"lat": 0, "lng": 0}},
    )


def _register(api_client: TestClient, role: str = "customer", email: str = "customer@example.com"):
    return api_client.post(
        "/api/auth/register",
        json={
            "name": "Test User",
            "email": email,
            "password": "secret1",
            "phone": "+966500000000",
            "role": role,
        },
    )


def test_health_endpoints(api_client: TestClient, supabase):
    _seed_directory(supabase)

    assert api_client.get("/api/health").json() == {"status": "ok"}
    database = api_client.get("/api/health/database").json()
    assert database["connected"] is True
    assert database["electricians_count"] == 3
    assert api_client.get("/api").json()["status"] == "running"


def test_database_health_reports_errors(api_client: TestClient, supabase):
    supabase.failures[ELECTRICIANS_TABLE] = RuntimeError("timeout")

    payload = api_client.get("/api/health/database").json()

    assert payload["connected"] is False
    assert payload["error"] == "timeout"


@pytest.mark.parametrize("path", ["/dashboard", "/profile", "/map"])
def test_protected_pages_redirect_to_login(api_client: TestClient, path: str):
    response = api_client.get(path, follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/login"


@pytest.mark.parametrize("path", ["/", "/no/such/page"])
def test_landing_redirects_by_auth_state(api_client: TestClient, path: str):
    assert api_client.get(path, follow_redirects=False).headers["location"] == "/login"

    assert _register(api_client).status_code == 201
    assert api_client.get(path, follow_redirects=False).headers["location"] == "/dashboard"


def test_login_and_register_pages(api_client: TestClient):
    assert api_client.get("/login").json()["page"] == "login"
    register_form = api_client.get("/register").json()
    assert {field["name"] for field in register_form["fields"]} >= {"name", "email", "password", "role"}

    _register(api_client)

    for path in ("/login", "/register"):
        response = api_client.get(path, follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/dashboard"


def test_register_login_logout_flow(api_client: TestClient):
    assert _register(api_client).status_code == 201
    me = api_client.get("/api/auth/me").json()
    assert me["role"] == "customer"
    assert me["profile"]["display_name"] == "Test User"

    assert api_client.post("/api/auth/logout").json()["success"] is True
    assert api_client.get("/api/auth/me").status_code == 401

    bad = api_client.post("/api/auth/login", json={"email": "customer@example.com", "password": "nope"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid login credentials"

    good = api_client.post("/api/auth/login", json={"email": "customer@example.com", "password": "secret1"})
    assert good.status_code == 200
    assert api_client.get("/api/auth/me").json()["email"] == "customer@example.com"


def test_registration_validation_and_provider_errors(api_client: TestClient):
    short = api_client.post(
        "/api/auth/register",
        json={"name": "X", "email": "x@example.com", "password": "123", "phone": "1"},
    )
    assert short.status_code == 422

    assert _register(api_client).status_code == 201
    duplicate = _register(api_client)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "User already registered"


def test_customer_dashboard_lists_electricians_with_distances(api_client: TestClient, supabase):
    _seed_directory(supabase)
    _register(api_client)

    payload = api_client.get("/dashboard", params={**RIYADH, "sort": "distance"}).json()
    discovery = payload["discovery"]

    assert payload["role"] == "customer"
    assert discovery["location_status"] == "Location enabled"
    assert [item["electrician"]["id"] for item in discovery["items"]] == ["e2", "e1", "e3"]
    assert discovery["items"][1]["distance_km"] == 5.5
    assert discovery["items"][2]["distance_km"] is None
    assert discovery["items"][1]["electrician"]["hourly_rate"] == 80.0
    assert discovery["items"][0]["electrician"]["hourly_rate"] == 50.0


def test_electrician_dashboard_shows_own_profile(api_client: TestClient):
    _register(api_client, role="electrician", email="pro@example.com")

    payload = api_client.get("/dashboard").json()

    assert payload["role"] == "electrician"
    assert payload["profile"]["location"] == {"lat": 25.2048, "lng": 55.2708}
    assert "discovery" not in payload


def test_map_page_for_customer(api_client: TestClient, supabase):
    _seed_directory(supabase)
    _register(api_client)

    payload = api_client.get("/map", params={**RIYADH, "marker": "electrician:e1"}).json()

    assert payload["markers_on_map"] == 3
    assert payload["map"]["viewport"]["mode"] == "fit_bounds"
    assert payload["map"]["viewport"]["max_zoom"] == 15
    assert payload["discovery"]["selected"]["id"] == "e1"


def test_map_page_falls_back_to_default_location(api_client: TestClient, supabase):
    _seed_directory(supabase)
    _register(api_client)

    payload = api_client.get("/map").json()

    assert payload["discovery"]["user_location"] == RIYADH
    assert payload["discovery"]["location_status"] == "Geolocation is not supported in this browser."
    assert any(marker["kind"] == "user" for marker in payload["map"]["markers"])


def test_map_page_is_customer_only(api_client: TestClient):
    _register(api_client, role="electrician", email="pro@example.com")

    response = api_client.get("/map", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/dashboard"


def test_newly_registered_electrician_appears_on_map(api_client: TestClient):
    _register(api_client, role="electrician", email="pro@example.com")
    api_client.post("/api/auth/logout")
    _register(api_client)

    payload = api_client.get("/map").json()

    positions = [(m["lat"], m["lng"]) for m in payload["map"]["markers"] if m["kind"] == "electrician"]
    assert positions == [(25.2048, 55.2708)]


def test_electricians_api(api_client: TestClient, supabase):
    _seed_directory(supabase)

    listing = api_client.get("/api/electricians", params={"q": "SOLAR"}).json()
    assert [item["electrician"]["id"] for item in listing["items"]] == ["e2"]
    assert listing["user_location"] is None

    assert api_client.get("/api/electricians", params={"sort": "cheapest"}).status_code == 422

    assert api_client.get("/api/electricians/e1").json()["display_name"] == "Ahmed Hassan"
    assert api_client.get("/api/electricians/e3").json()["location"] is None
    assert api_client.get("/api/electricians/missing").status_code == 404

    geojson = api_client.get("/api/electricians/geojson", params=RIYADH).json()
    kinds = sorted(feature["properties"]["kind"] for feature in geojson["features"])
    assert kinds == ["electrician", "electrician", "user"]


def test_directory_failure_is_reported_not_raised(api_client: TestClient, supabase):
    supabase.failures[ELECTRICIANS_TABLE] = RuntimeError("network down")

    payload = api_client.get("/api/electricians").json()

    assert payload["items"] == []
    assert payload["fetch_error"] == "network down"


def test_booking_uses_electrician_rate(api_client: TestClient, supabase):
    _seed_directory(supabase)
    booking = {
        "electrician_id": "e1",
        "service_type": "Wiring",
        "address": "Olaya St",
        "scheduled_date": "2026-11-02T09:00:00Z",
        "estimated_hours": 2,
    }
    assert api_client.post("/api/bookings", json=booking).status_code == 401

    _register(api_client)
    response = api_client.post("/api/bookings", json=booking)

    assert response.status_code == 201
    payload = response.json()
    assert payload["status"] == "pending"
    assert payload["hourly_rate"] == 80.0
    assert payload["total_amount"] == 160.0
    assert supabase.tables[BOOKINGS_TABLE][0]["customer_id"] == api_client.get("/api/auth/me").json()["user_id"]

    assert api_client.post("/api/bookings", json={**booking, "electrician_id": "nobody"}).status_code == 404
    assert api_client.post("/api/bookings", json={**booking, "estimated_hours": 0}).status_code == 422

    supabase.failures[BOOKINGS_TABLE] = RuntimeError("insert failed")
    failed = api_client.post("/api/bookings", json=booking)
    assert failed.status_code == 502
    assert failed.json()["detail"] == "insert failed"


def test_electricians_cannot_book(api_client: TestClient, supabase):
    _seed_directory(supabase)
    _register(api_client, role="electrician", email="pro@example.com")

    response = api_client.post(
        "/api/bookings",
        json={
            "electrician_id": "e1",
            "service_type": "Wiring",
            "address": "Olaya St",
            "scheduled_date": "2026-11-02T09:00:00Z",
            "estimated_hours": 1,
        },
    )
    assert response.status_code == 403


def test_profile_endpoints(api_client: TestClient, supabase):
    assert api_client.get("/api/profile").status_code == 401
    _register(api_client)

    updated = api_client.put("/api/profile", json={"display_name": "Renamed", "phone": "+966511111111"})
    assert updated.status_code == 200
    assert updated.json()["display_name"] == "Renamed"
    assert api_client.get("/profile").json()["profile"]["phone"] == "+966511111111"

    forbidden = api_client.put("/api/profile/electrician", json={"bio": "x"})
    assert forbidden.status_code == 403


def test_electrician_profile_update(api_client: TestClient, supabase):
    _register(api_client, role="electrician", email="pro@example.com")

    response = api_client.put(
        "/api/profile/electrician", json={"bio": "Certified", "hourly_rate": 95, "radius": 30}
    )

    assert response.status_code == 200
    row = supabase.tables[ELECTRICIANS_TABLE][0]
    assert row["bio"] == "Certified"
    assert row["radius"] == 30
    assert api_client.get("/api/electricians/" + row["id"]).json()["service_radius_km"] == 30.0


def test_bio_generation_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/profile/bio",
        json={"name": "Ahmed", "experience": 8, "specialties": ["Solar"], "hourly_rate": 70},
    )

    assert response.status_code == 200
    assert "Ahmed" in response.json()["bio"]


def test_unconfigured_store_returns_service_unavailable():
    app = create_app(sessions=SessionRegistry(None))
    with TestClient(app) as client:
        assert client.get("/api/electricians").status_code == 503
        assert client.get("/api/health/database").json()["configured"] is False
        assert client.get("/dashboard", follow_redirects=False).headers["location"] == "/login"


def test_unexpected_errors_render_crash_notice(app, monkeypatch: pytest.MonkeyPatch):
    from energylink.api.routes import electricians as electricians_routes

    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(electricians_routes, "get_electrician", explode)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/electricians/e1")

    assert response.status_code == 500
    assert response.json()["error"] == "App crashed"


def test_register_and_login_return_session_token(api_client: TestClient):
    registered = _register(api_client).json()
    assert registered["session_token"]

    logged_in = api_client.post(
        "/api/auth/login", json={"email": "customer@example.com", "password": "secret1"}
    ).json()
    assert logged_in["session_token"]
    assert logged_in["session_token"] != registered["session_token"]


def test_signed_in_user_is_invisible_to_other_clients(app, api_client: TestClient, supabase):
    _seed_directory(supabase)
    assert _register(api_client, email="alice@example.com").status_code == 201
    stranger = TestClient(app)

    assert stranger.get("/api/auth/me").status_code == 401
    assert stranger.get("/api/profile").status_code == 401
    assert stranger.put("/api/profile", json={"display_name": "Hijacked"}).status_code == 401
    booking = {
        "electrician_id": "e1",
        "service_type": "Wiring",
        "address": "Olaya St",
        "scheduled_date": "2026-11-02T09:00:00Z",
        "estimated_hours": 1,
    }
    assert stranger.post("/api/bookings", json=booking).status_code == 401
    assert stranger.get("/dashboard", follow_redirects=False).headers["location"] == "/login"
    assert stranger.get("/login").json()["page"] == "login"

    assert _register(stranger, email="bob@example.com").status_code == 201
    assert stranger.get("/api/auth/me").json()["email"] == "bob@example.com"
    assert api_client.get("/api/auth/me").json()["email"] == "alice@example.com"
    assert api_client.get("/api/profile").json()["display_name"] == "Test User"

    assert stranger.post("/api/auth/logout").json()["success"] is True
    assert stranger.get("/api/auth/me").status_code == 401
    assert api_client.get("/api/auth/me").json()["email"] == "alice@example.com"


def test_bearer_token_selects_session(app, api_client: TestClient):
    token = _register(api_client, email="alice@example.com").json()["session_token"]
    headless = TestClient(app)

    me = headless.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"

    assert headless.get("/api/auth/me", headers={"Authorization": "Bearer forged"}).status_code == 401
    assert headless.get("/api/auth/me").status_code == 401


def test_non_finite_directory_values_use_defaults(api_client: TestClient, supabase):
    supabase.seed(
        ELECTRICIANS_TABLE,
        {"id": "n1", "name": "Nadia", "hourlyRate": "NaN", "rating": "NaN", "completedJobs": "Infinity"},
        {"id": "n2", "name": "Noor", "hourlyRate": 60},
    )

    payload = api_client.get("/api/electricians").json()

    assert payload["fetch_error"] is None
    by_id = {item["electrician"]["id"]: item["electrician"] for item in payload["items"]}
    assert set(by_id) == {"n1", "n2"}
    assert by_id["n1"]["hourly_rate"] == 50.0
    assert by_id["n1"]["completed_jobs"] == 0
    assert by_id["n2"]["hourly_rate"] == 60.0


def test_unknown_api_paths_are_not_found(api_client: TestClient):
    for path in ("/api/no-such-endpoint", "/api/electricians/e1/extra/segments"):
        response = api_client.get(path, follow_redirects=False)
        assert response.status_code == 404

    assert api_client.get("/no/such/page", follow_redirects=False).status_code == 307
