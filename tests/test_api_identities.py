"""End-to-end tests for /api/identities/* against a stubbed Kratos."""
import pytest
import requests

from tests.conftest import make_identity

IDENTITIES = "/admin/identities"


@pytest.fixture
def fifteen(kratos):
    identities = [make_identity(f"id-{i:02d}") for i in range(15)]
    kratos.on("GET", IDENTITIES, identities)
    return identities


# ============================================================================
# List
# ============================================================================

def test_list_second_page_of_fifteen(client, auth_headers, fifteen):
    response = client.get("/api/identities?page=2&per_page=10", headers=auth_headers)

    assert response.status_code == 200
    payload = response.get_json()
    assert [i["id"] for i in payload["data"]] == [f"id-{i:02d}" for i in range(10, 15)]
    assert payload["total"] == 15
    assert payload["page"] == 2
    assert payload["per_page"] == 10


def test_list_defaults(client, auth_headers, fifteen):
    payload = client.get("/api/identities", headers=auth_headers).get_json()
    assert payload["page"] == 1
    assert payload["per_page"] == 20
    assert len(payload["data"]) == 15


def test_list_page_past_end(client, auth_headers, fifteen):
    payload = client.get("/api/identities?page=9&per_page=10", headers=auth_headers).get_json()
    assert payload["data"] == []
    assert payload["total"] == 15


@pytest.mark.parametrize("query", ["page=0", "per_page=-1", "page=abc"])
def test_list_invalid_paging(client, auth_headers, kratos, query):
    response = client.get(f"/api/identities?{query}", headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid query parameter"
    assert kratos.calls == []


def test_list_upstream_failure_passes_details(client, auth_headers, kratos):
    kratos.on("GET", IDENTITIES, status_code=500, text="database is locked")

    response = client.get("/api/identities", headers=auth_headers)

    assert response.status_code == 500
    payload = response.get_json()
    assert payload["error"] == "Failed to fetch identities"
    assert "database is locked" in payload["details"]


def test_list_transport_failure(client, auth_headers, kratos):
    kratos.fail("GET", IDENTITIES, requests.ConnectTimeout("timed out"))
    response = client.get("/api/identities", headers=auth_headers)
    assert response.status_code == 500
    assert "timed out" in response.get_json()["details"]


def test_list_non_array_body(client, auth_headers, kratos):
    kratos.on("GET", IDENTITIES, {"identities": []})

    response = client.get("/api/identities", headers=auth_headers)

    assert response.status_code == 500
    payload = response.get_json()
    assert payload["error"] == "Failed to fetch identities"
    assert "expected a JSON array" in payload["details"]


# ============================================================================
# Get
# ============================================================================

def test_get_identity(client, auth_headers, kratos):
    kratos.on("GET", f"{IDENTITIES}/abc", make_identity("abc"))

    response = client.get("/api/identities/abc", headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json()["id"] == "abc"
    assert "params" not in kratos.calls[0][2] or kratos.calls[0][2]["params"] is None


def test_get_identity_include_credentials(client, auth_headers, kratos):
    kratos.on("GET", f"{IDENTITIES}/abc", make_identity("abc"))

    client.get("/api/identities/abc?include_credentials=true", headers=auth_headers)

    assert "include_credential" in kratos.calls[0][2]["params"]


def test_get_identity_not_found(client, auth_headers, kratos):
    kratos.on("GET", f"{IDENTITIES}/nope", status_code=404, text='{"error":{"code":404}}')

    response = client.get("/api/identities/nope", headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json()["error"] == "Identity not found"


# ============================================================================
# Create / update / delete
# ============================================================================

def test_create_identity(client, auth_headers, kratos):
    kratos.on("POST", IDENTITIES, make_identity("new", email="new@example.com"), status_code=201)

    response = client.post(
        "/api/identities",
        json={"schema_id": "default", "traits": {"email": "new@example.com"}, "state": "active"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.get_json()["id"] == "new"
    assert kratos.calls[0][2]["json"] == {
        "schema_id": "default",
        "traits": {"email": "new@example.com"},
        "state": "active",
    }


@pytest.mark.parametrize("body", [
    {"traits": {"email": "x@example.com"}},
    {"schema_id": "default"},
    {"schema_id": "default", "traits": {}, "state": "frozen"},
    {"schema_id": "default", "traits": {}, "state": ["active"]},
])
def test_create_identity_invalid_body(client, auth_headers, kratos, body):
    response = client.post("/api/identities", json=body, headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid request body"
    assert "details" in response.get_json()
    assert kratos.calls == []


def test_create_identity_non_json(client, auth_headers, kratos):
    response = client.post("/api/identities", data="nope", content_type="text/plain", headers=auth_headers)
    assert response.status_code == 400
    assert kratos.calls == []


def test_create_identity_upstream_conflict(client, auth_headers, kratos):
    kratos.on("POST", IDENTITIES, status_code=409, text="identity already exists")

    response = client.post(
        "/api/identities",
        json={"schema_id": "default", "traits": {"email": "dup@example.com"}},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert "already exists" in response.get_json()["details"]


def test_update_identity(client, auth_headers, kratos):
    kratos.on("PUT", f"{IDENTITIES}/abc", make_identity("abc", state="inactive"))

    response = client.put(
        "/api/identities/abc",
        json={"schema_id": "default", "traits": {"email": "abc@example.com"}, "state": "inactive"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.get_json()["state"] == "inactive"


def test_update_missing_identity(client, auth_headers, kratos):
    kratos.on("PUT", f"{IDENTITIES}/gone", status_code=404, text="not found")
    response = client.put(
        "/api/identities/gone",
        json={"schema_id": "default", "traits": {}},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_delete_identity(client, auth_headers, kratos):
    kratos.on("DELETE", f"{IDENTITIES}/abc", status_code=204)

    response = client.delete("/api/identities/abc", headers=auth_headers)

    assert response.status_code == 204
    assert response.data == b""


# ============================================================================
# Sessions, password, credentials
# ============================================================================

def test_identity_sessions(client, auth_headers, kratos):
    kratos.on("GET", f"{IDENTITIES}/abc/sessions", [{"id": "s1", "active": True}])

    response = client.get("/api/identities/abc/sessions", headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json() == {"data": [{"id": "s1", "active": True}]}


def test_reset_password(client, auth_headers, kratos):
    kratos.on("GET", f"{IDENTITIES}/abc", make_identity("abc"))
    kratos.on("PUT", f"{IDENTITIES}/abc", make_identity("abc"))

    response = client.post(
        "/api/identities/abc/reset-password",
        json={"password": "brand-new-pass"},
        headers=auth_headers,
    )

    assert response.status_code == 204
    put_body = kratos.calls_to("PUT", f"{IDENTITIES}/abc")[0][2]["json"]
    assert put_body["credentials"] == {"password": {"config": {"password": "brand-new-pass"}}}


def test_reset_password_too_short(client, auth_headers, kratos):
    response = client.post(
        "/api/identities/abc/reset-password",
        json={"password": "short"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert kratos.calls == []


def test_reset_password_bad_traits(client, auth_headers, kratos):
    identity = make_identity("abc")
    identity["traits"] = None
    kratos.on("GET", f"{IDENTITIES}/abc", identity)

    response = client.post(
        "/api/identities/abc/reset-password",
        json={"password": "brand-new-pass"},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.get_json()["error"] == "Failed to reset password"


def test_delete_totp_credential(client, auth_headers, kratos):
    kratos.on("DELETE", f"{IDENTITIES}/abc/credentials/totp", status_code=204)

    response = client.delete("/api/identities/abc/credentials/totp", headers=auth_headers)

    assert response.status_code == 204
    assert len(kratos.calls) == 1


def test_delete_oidc_credential_rejected(client, auth_headers, kratos):
    response = client.delete("/api/identities/abc/credentials/oidc", headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid credential type"
    assert kratos.calls == []


def test_encoded_id_stays_in_path(client, auth_headers, kratos):
    kratos.on("DELETE", f"{IDENTITIES}/abc%3Fforce%3Dtrue", status_code=204)

    response = client.delete("/api/identities/abc%3Fforce=true", headers=auth_headers)

    assert response.status_code == 204
    (_, path, kwargs), = kratos.calls
    assert path == f"{IDENTITIES}/abc%3Fforce%3Dtrue"
    assert "params" not in kwargs
