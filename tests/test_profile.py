import json

from tests.conftest import API, auth_headers


def test_read_profile_hides_password(client, patient_token):
    response = client.get(f"{API}/profile", headers=auth_headers(patient_token))
    assert response.status_code == 200
    user_data = response.json()["user_data"]
    assert user_data["email"] == "asha@clinicbook.io"
    assert user_data["phone"] == "0000000000"
    assert user_data["gender"] == "Not Selected"
    assert user_data["address"] == {"line1": "", "line2": ""}
    assert "hashed_password" not in user_data
    assert "password" not in user_data


def test_update_profile(client, patient_token, blob_store):
    """Test a multipart profile update with an image"""
    response = client.put(
        f"{API}/profile",
        data={
            "name": "Asha R.",
            "phone": "9876543210",
            "dob": "1990-04-01",
            "gender": "Female",
            "address": json.dumps({"line1": "12 MG Road", "line2": "Bengaluru"}),
        },
        files={"image": ("me.png", b"\x89PNG fake", "image/png")},
        headers=auth_headers(patient_token),
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Profile Updated"}

    blob_store.upload.assert_called_once()
    assert blob_store.upload.call_args.kwargs["folder"] == "profiles"

    user_data = client.get(f"{API}/profile", headers=auth_headers(patient_token)).json()["user_data"]
    assert user_data["name"] == "Asha R."
    assert user_data["phone"] == "9876543210"
    assert user_data["address"] == {"line1": "12 MG Road", "line2": "Bengaluru"}
    assert user_data["image"].endswith(".png")


def test_update_profile_without_image_keeps_address(client, patient_token, blob_store):
    response = client.put(
        f"{API}/profile",
        data={"name": "Asha", "phone": "9876543210", "dob": "1990-04-01", "gender": "Female"},
        headers=auth_headers(patient_token),
    )
    assert response.status_code == 200
    blob_store.upload.assert_not_called()

    user_data = client.get(f"{API}/profile", headers=auth_headers(patient_token)).json()["user_data"]
    assert user_data["address"] == {"line1": "", "line2": ""}
    assert user_data["image"] is None


def test_update_profile_requires_fields(client, patient_token):
    response = client.put(
        f"{API}/profile",
        data={"name": "Asha", "phone": "9876543210"},
        headers=auth_headers(patient_token),
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Data Missing"}


def test_update_profile_rejects_malformed_address(client, patient_token):
    response = client.put(
        f"{API}/profile",
        data={
            "name": "Asha",
            "phone": "9876543210",
            "dob": "1990-04-01",
            "gender": "Female",
            "address": "12 MG Road",
        },
        headers=auth_headers(patient_token),
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
