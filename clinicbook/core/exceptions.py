"""
Domain errors raised by the service layer.

Each error carries the HTTP status and the human-readable message that the
application's exception handlers put into the response envelope.
"""
from typing import Optional


class ClinicBookError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ClinicBookError):
    status_code = 400
    default_message = "Missing Details"


class NotFound(ClinicBookError):
    status_code = 404
    default_message = "Not found"


class Unauthorized(ClinicBookError):
    status_code = 403
    default_message = "Unauthorized action"


class Conflict(ClinicBookError):
    status_code = 409
    default_message = "Conflict"


class SlotAlreadyBooked(Conflict):
    default_message = "Slot Not Available"


class DoctorUnavailable(Conflict):
    default_message = "Doctor Not Available"


class UpstreamFailure(ClinicBookError):
    status_code = 502
    default_message = "Upstream service failed"
