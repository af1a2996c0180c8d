from .user import User
from .doctor import Doctor, BookedSlot
from .appointment import Appointment
from .report import Report
