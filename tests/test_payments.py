from types import SimpleNamespace

import pytest

from clinicbook import crud
from clinicbook.core.config import Settings
from clinicbook.core.exceptions import UpstreamFailure
from clinicbook.services.payments import build_razorpay_gateway, build_stripe_gateway
from tests.conftest import API, auth_headers, book


@pytest.fixture
def appointment_id(client, patient_token, doctor):
    return book(client, patient_token, doctor.id).json()["appointment"]["id"]


def _payment_flag(db, appointment_id):
    db.expire_all()
    return crud.appointment.get(db, id=appointment_id).payment


class TestRazorpay:
    def test_create_order(self, client, patient_token, appointment_id, razorpay_client):
        response = client.post(
            f"{API}/payments/razorpay",
            json={"appointment_id": appointment_id},
            headers=auth_headers(patient_token),
        )
        assert response.status_code == 200
        assert response.json()["order"]["id"] == "order_123"
        razorpay_client.order.create.assert_called_once_with(
            data={"amount": 50000, "currency": "INR", "receipt": str(appointment_id)}
        )

    def test_create_order_for_cancelled_appointment(self, client, patient_token, appointment_id, razorpay_client):
        client.post(f"{API}/appointments/{appointment_id}/cancel", headers=auth_headers(patient_token))

        response = client.post(
            f"{API}/payments/razorpay",
            json={"appointment_id": appointment_id},
            headers=auth_headers(patient_token),
        )
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Appointment Cancelled or not found"}
        razorpay_client.order.create.assert_not_called()

    def test_create_order_for_someone_elses_appointment(self, client, other_patient_token, appointment_id):
        response = client.post(
            f"{API}/payments/razorpay",
            json={"appointment_id": appointment_id},
            headers=auth_headers(other_patient_token),
        )
        assert response.status_code == 403

    def test_gateway_error_is_upstream_failure(self, client, patient_token, appointment_id, razorpay_client):
        razorpay_client.order.create.side_effect = RuntimeError("gateway down")
        response = client.post(
            f"{API}/payments/razorpay",
            json={"appointment_id": appointment_id},
            headers=auth_headers(patient_token),
        )
        assert response.status_code == 502
        assert response.json() == {"success": False, "message": "gateway down"}

    def test_verify_unpaid_order(self, client, db, patient_token, appointment_id, razorpay_client):
        razorpay_client.order.fetch.return_value = {"id": "order_123", "status": "attempted", "receipt": str(appointment_id)}

        response = client.post(
            f"{API}/payments/razorpay/verify",
            json={"razorpay_order_id": "order_123"},
            headers=auth_headers(patient_token),
        )
        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "Payment Failed"}
        assert _payment_flag(db, appointment_id) is False

    def test_verify_paid_order(self, client, db, patient_token, appointment_id, razorpay_client):
        """Test payment is only flagged once the gateway reports the order as paid"""
        razorpay_client.order.fetch.return_value = {"id": "order_123", "status": "paid", "receipt": str(appointment_id)}

        response = client.post(
            f"{API}/payments/razorpay/verify",
            json={"razorpay_order_id": "order_123"},
            headers=auth_headers(patient_token),
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Payment Successful"}
        razorpay_client.order.fetch.assert_called_once_with("order_123")
        assert _payment_flag(db, appointment_id) is True

    def test_verify_order_for_someone_elses_appointment(
        self, client, db, other_patient_token, appointment_id, razorpay_client
    ):
        razorpay_client.order.fetch.return_value = {"id": "order_123", "status": "paid", "receipt": str(appointment_id)}

        response = client.post(
            f"{API}/payments/razorpay/verify",
            json={"razorpay_order_id": "order_123"},
            headers=auth_headers(other_patient_token),
        )
        assert response.status_code == 403
        assert _payment_flag(db, appointment_id) is False


class TestStripe:
    def test_create_checkout_session(self, client, patient_token, appointment_id, stripe_client):
        response = client.post(
            f"{API}/payments/stripe",
            json={"appointment_id": appointment_id},
            headers={**auth_headers(patient_token), "Origin": "http://localhost:5173"},
        )
        assert response.status_code == 200
        assert response.json()["session_url"] == "https://checkout.stripe.com/c/pay/cs_test_123"

        params = stripe_client.checkout.sessions.create.call_args.kwargs["params"]
        assert params["mode"] == "payment"
        assert params["client_reference_id"] == str(appointment_id)
        assert params["success_url"].startswith(
            f"http://localhost:5173/verify?success=true&appointmentId={appointment_id}"
        )
        assert params["cancel_url"] == f"http://localhost:5173/verify?success=false&appointmentId={appointment_id}"
        line_item = params["line_items"][0]
        assert line_item["quantity"] == 1
        assert line_item["price_data"] == {
            "currency": "inr",
            "product_data": {"name": "Appointment Fees"},
            "unit_amount": 50000,
        }

    def test_verify_paid_session(self, client, db, patient_token, appointment_id, stripe_client):
        stripe_client.checkout.sessions.retrieve.return_value = SimpleNamespace(
            payment_status="paid", client_reference_id=str(appointment_id)
        )
        response = client.post(
            f"{API}/payments/stripe/verify",
            json={"appointment_id": appointment_id, "session_id": "cs_test_123"},
            headers=auth_headers(patient_token),
        )
        assert response.json() == {"success": True, "message": "Payment Successful"}
        assert _payment_flag(db, appointment_id) is True

    def test_verify_unpaid_session(self, client, db, patient_token, appointment_id, stripe_client):
        stripe_client.checkout.sessions.retrieve.return_value = SimpleNamespace(
            payment_status="unpaid", client_reference_id=str(appointment_id)
        )
        response = client.post(
            f"{API}/payments/stripe/verify",
            json={"appointment_id": appointment_id, "session_id": "cs_test_123"},
            headers=auth_headers(patient_token),
        )
        assert response.json() == {"success": False, "message": "Payment Failed"}
        assert _payment_flag(db, appointment_id) is False

    def test_verify_session_paid_for_another_appointment(
        self, client, db, patient_token, appointment_id, doctor, stripe_client
    ):
        other_id = book(client, patient_token, doctor.id, slot_time="11:00").json()["appointment"]["id"]
        stripe_client.checkout.sessions.retrieve.return_value = SimpleNamespace(
            payment_status="paid", client_reference_id=str(other_id)
        )
        response = client.post(
            f"{API}/payments/stripe/verify",
            json={"appointment_id": appointment_id, "session_id": "cs_test_123"},
            headers=auth_headers(patient_token),
        )
        assert response.json()["success"] is False
        assert _payment_flag(db, appointment_id) is False
        assert _payment_flag(db, other_id) is False


def test_unconfigured_gateways_raise():
    settings = Settings(RAZORPAY_KEY_ID=None, RAZORPAY_KEY_SECRET=None, STRIPE_SECRET_KEY=None)
    with pytest.raises(UpstreamFailure, match="Razorpay is not configured"):
        build_razorpay_gateway(settings)
    with pytest.raises(UpstreamFailure, match="Stripe is not configured"):
        build_stripe_gateway(settings)
