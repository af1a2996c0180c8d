from fastapi import APIRouter

from clinicbook.api.v1.endpoints import auth
from clinicbook.api.v1.endpoints import profile
from clinicbook.api.v1.endpoints import doctors
from clinicbook.api.v1.endpoints import appointments
from clinicbook.api.v1.endpoints import payments
from clinicbook.api.v1.endpoints import reports
from clinicbook.api.v1.endpoints import admin

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
# Admin dashboard
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
