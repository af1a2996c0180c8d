from .common import Envelope, ErrorEnvelope
from .user import User, UserCreate, UserLogin, UserUpdate, Address, Token, TokenPayload, ProfileResponse
from .doctor import Doctor, DoctorCreate, DoctorPublic, DoctorListResponse, AdminDoctorListResponse
from .appointment import Appointment, AppointmentCreate, AppointmentResponse, AppointmentListResponse
from .payment import PaymentRequest, RazorpayVerifyRequest, StripeVerifyRequest, RazorpayOrderResponse, StripeSessionResponse
from .report import Report, ReportResponse, ReportListResponse
