from .user import user
from .doctor import doctor
from .appointment import appointment
from .report import report

__all__ = ["user", "doctor", "appointment", "report"]
