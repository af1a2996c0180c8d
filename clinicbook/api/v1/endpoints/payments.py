import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from clinicbook import crud, models
from clinicbook.api import deps
from clinicbook.core.config import settings
from clinicbook.core.exceptions import Unauthorized
from clinicbook.schemas.common import Envelope
from clinicbook.schemas.payment import (
    PaymentRequest,
    RazorpayOrderResponse,
    RazorpayVerifyRequest,
    StripeSessionResponse,
    StripeVerifyRequest,
)
from clinicbook.services import appointments as appointment_service
from clinicbook.services.payments import RazorpayGateway, StripeGateway

logger = logging.getLogger(__name__)

router = APIRouter()

PAYMENT_FAILED = "Payment Failed"
PAYMENT_SUCCESSFUL = "Payment Successful"


@router.post("/razorpay", response_model=RazorpayOrderResponse)
def create_razorpay_order(
    *,
    db: Session = Depends(deps.get_db),
    payment_in: PaymentRequest,
    current_user: models.User = Depends(deps.get_current_user),
    gateway: RazorpayGateway = Depends(deps.get_razorpay_gateway),
) -> Any:
    appointment = appointment_service.get_payable(
        db, user=current_user, appointment_id=payment_in.appointment_id
    )
    return RazorpayOrderResponse(order=gateway.create_order(appointment))


@router.post("/razorpay/verify", response_model=Envelope)
def verify_razorpay(
    *,
    db: Session = Depends(deps.get_db),
    verify_in: RazorpayVerifyRequest,
    current_user: models.User = Depends(deps.get_current_user),
    gateway: RazorpayGateway = Depends(deps.get_razorpay_gateway),
) -> Any:
    """
    Flag the appointment as paid once Razorpay reports the order as paid.
    """
    appointment_id = gateway.paid_appointment_id(verify_in.razorpay_order_id)
    if appointment_id is None:
        return Envelope(success=False, message=PAYMENT_FAILED)

    appointment = crud.appointment.get(db, id=appointment_id)
    if not appointment:
        return Envelope(success=False, message=PAYMENT_FAILED)
    if appointment.user_id != current_user.id:
        raise Unauthorized()

    crud.appointment.mark_paid(db, db_obj=appointment)
    logger.info(f"Razorpay payment confirmed for appointment {appointment.id}")
    return Envelope(message=PAYMENT_SUCCESSFUL)


@router.post("/stripe", response_model=StripeSessionResponse)
def create_stripe_session(
    *,
    db: Session = Depends(deps.get_db),
    payment_in: PaymentRequest,
    current_user: models.User = Depends(deps.get_current_user),
    gateway: StripeGateway = Depends(deps.get_stripe_gateway),
    origin: Optional[str] = Header(None),
) -> Any:
    appointment = appointment_service.get_payable(
        db, user=current_user, appointment_id=payment_in.appointment_id
    )
    session_url = gateway.create_checkout_session(
        appointment, origin=origin or settings.FRONTEND_URL
    )
    return StripeSessionResponse(session_url=session_url)


@router.post("/stripe/verify", response_model=Envelope)
def verify_stripe(
    *,
    db: Session = Depends(deps.get_db),
    verify_in: StripeVerifyRequest,
    current_user: models.User = Depends(deps.get_current_user),
    gateway: StripeGateway = Depends(deps.get_stripe_gateway),
) -> Any:
    """
    Flag the appointment as paid once the checkout session for it is paid.
    """
    appointment = appointment_service.get_payable(
        db, user=current_user, appointment_id=verify_in.appointment_id
    )
    if not gateway.is_paid(verify_in.session_id, appointment.id):
        return Envelope(success=False, message=PAYMENT_FAILED)

    crud.appointment.mark_paid(db, db_obj=appointment)
    logger.info(f"Stripe payment confirmed for appointment {appointment.id}")
    return Envelope(message=PAYMENT_SUCCESSFUL)
