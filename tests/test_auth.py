from clinicbook.core import security
from tests.conftest import API, PASSWORD, auth_headers, register


def test_register_returns_token(client):
    """Test registering a patient signs them in"""
    response = client.post(
        f"{API}/auth/register",
        json={"name": "Asha Rao", "email": "Asha@ClinicBook.io", "password": PASSWORD},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["token"]


def test_register_requires_all_fields(client):
    response = client.post(f"{API}/auth/register", json={"name": "Asha", "email": "asha@clinicbook.io"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing Details"}


def test_register_rejects_invalid_email(client):
    response = client.post(
        f"{API}/auth/register",
        json={"name": "Asha", "email": "not-an-email", "password": PASSWORD},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Please enter a valid email"


def test_register_rejects_short_password(client):
    response = client.post(
        f"{API}/auth/register",
        json={"name": "Asha", "email": "asha@clinicbook.io", "password": "short"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Please enter a strong password"


def test_register_rejects_duplicate_email(client):
    register(client)
    response = client.post(
        f"{API}/auth/register",
        json={"name": "Someone Else", "email": "ASHA@clinicbook.io", "password": PASSWORD},
    )
    assert response.status_code == 409
    assert response.json()["success"] is False


def test_login(client):
    """Test login with correct and incorrect credentials"""
    register(client)

    response = client.post(f"{API}/auth/login", json={"email": "asha@clinicbook.io", "password": PASSWORD})
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = client.post(f"{API}/auth/login", json={"email": "asha@clinicbook.io", "password": "wrong-pass"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid credentials"}

    response = client.post(f"{API}/auth/login", json={"email": "nobody@clinicbook.io", "password": PASSWORD})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "User does not exist"}


def test_protected_endpoint_requires_token(client):
    response = client.get(f"{API}/profile")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_protected_endpoint_rejects_bad_token(client):
    response = client.get(f"{API}/profile", headers=auth_headers("not-a-jwt"))
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Not Authorized Login Again"}


def test_admin_token_is_not_a_patient_token(client, admin_token):
    response = client.get(f"{API}/profile", headers=auth_headers(admin_token))
    assert response.status_code == 401


def test_token_for_deleted_user(client):
    token = security.create_access_token(9999)
    response = client.get(f"{API}/profile", headers=auth_headers(token))
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "User not found"}
