"""
Payment gateways for appointment fees.

Both gateways follow the same two steps: create a charge for an appointment
that is neither missing nor cancelled, then confirm it by asking the gateway
for its status. The appointment's ``payment`` flag is only set when the
gateway itself reports the charge as paid for that exact appointment.

Gateway clients are built once from settings and handed to the endpoints
through FastAPI dependencies, so tests can swap in fakes.
"""
import logging
from typing import Any, Dict, Optional

from clinicbook.core.config import Settings
from clinicbook.core.exceptions import UpstreamFailure
from clinicbook.models.appointment import Appointment

logger = logging.getLogger(__name__)


def _amount_in_minor_units(amount: float) -> int:
    return int(round(amount * 100))


class RazorpayGateway:
    def __init__(self, client, currency: str):
        self.client = client
        self.currency = currency

    def create_order(self, appointment: Appointment) -> Dict[str, Any]:
        options = {
            "amount": _amount_in_minor_units(appointment.amount),
            "currency": self.currency,
            "receipt": str(appointment.id),
        }
        try:
            order = self.client.order.create(data=options)
        except Exception as e:
            logger.error(f"Razorpay order creation failed for appointment {appointment.id}: {e}")
            raise UpstreamFailure(str(e))
        logger.info(f"Razorpay order {order.get('id')} created for appointment {appointment.id}")
        return order

    def paid_appointment_id(self, order_id: str) -> Optional[int]:
        """Return the appointment id an order was paid for, or None if it is not paid."""
        try:
            order_info = self.client.order.fetch(order_id)
        except Exception as e:
            logger.error(f"Razorpay order fetch failed for {order_id}: {e}")
            raise UpstreamFailure(str(e))
        if order_info.get("status") != "paid":
            return None
        try:
            return int(order_info.get("receipt"))
        except (TypeError, ValueError):
            return None


class StripeGateway:
    def __init__(self, client, currency: str):
        self.client = client
        self.currency = currency.lower()

    def create_checkout_session(self, appointment: Appointment, origin: str) -> str:
        line_items = [{
            "price_data": {
                "currency": self.currency,
                "product_data": {"name": "Appointment Fees"},
                "unit_amount": _amount_in_minor_units(appointment.amount),
            },
            "quantity": 1,
        }]
        params = {
            "success_url": f"{origin}/verify?success=true&appointmentId={appointment.id}&session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{origin}/verify?success=false&appointmentId={appointment.id}",
            "line_items": line_items,
            "mode": "payment",
            "client_reference_id": str(appointment.id),
        }
        try:
            session = self.client.checkout.sessions.create(params=params)
        except Exception as e:
            logger.error(f"Stripe session creation failed for appointment {appointment.id}: {e}")
            raise UpstreamFailure(str(e))
        return session.url

    def is_paid(self, session_id: str, appointment_id: int) -> bool:
        try:
            session = self.client.checkout.sessions.retrieve(session_id)
        except Exception as e:
            logger.error(f"Stripe session retrieval failed for {session_id}: {e}")
            raise UpstreamFailure(str(e))
        return (
            session.payment_status == "paid"
            and session.client_reference_id == str(appointment_id)
        )


def build_razorpay_gateway(settings: Settings) -> RazorpayGateway:
    if not settings.RAZORPAY_KEY_ID or not settings.RAZORPAY_KEY_SECRET:
        raise UpstreamFailure("Razorpay is not configured")
    import razorpay
    client = razorpay.Client(auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET))
    return RazorpayGateway(client, currency=settings.CURRENCY)


def build_stripe_gateway(settings: Settings) -> StripeGateway:
    if not settings.STRIPE_SECRET_KEY:
        raise UpstreamFailure("Stripe is not configured")
    import stripe
    client = stripe.StripeClient(settings.STRIPE_SECRET_KEY)
    return StripeGateway(client, currency=settings.CURRENCY)
