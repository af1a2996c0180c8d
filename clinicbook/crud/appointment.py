from typing import List, Optional
from sqlalchemy.orm import Session

from clinicbook.models.appointment import Appointment


class CRUDAppointment:
    def get(self, db: Session, id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == id).first()

    def get_patient_appointments(self, db: Session, *, user_id: int) -> List[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.user_id == user_id)
            .order_by(Appointment.id.desc())
            .all()
        )

    def get_all(self, db: Session) -> List[Appointment]:
        return db.query(Appointment).order_by(Appointment.id.desc()).all()

    def update_status(self, db: Session, *, db_obj: Appointment, **fields) -> Appointment:
        for field, value in fields.items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def mark_paid(self, db: Session, *, db_obj: Appointment) -> Appointment:
        return self.update_status(db, db_obj=db_obj, payment=True)

    def mark_completed(self, db: Session, *, db_obj: Appointment) -> Appointment:
        return self.update_status(db, db_obj=db_obj, is_completed=True)


appointment = CRUDAppointment()
