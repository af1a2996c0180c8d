from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from clinicbook.core.security import get_password_hash
from clinicbook.models.doctor import Doctor
from clinicbook.schemas.doctor import DoctorCreate


class CRUDDoctor:
    def get(self, db: Session, id: int) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.id == id).first()

    def get_by_email(self, db: Session, email: str) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.email == email.lower()).first()

    def get_all_with_slots(self, db: Session) -> List[Doctor]:
        return (
            db.query(Doctor)
            .options(selectinload(Doctor.booked_slots))
            .order_by(Doctor.id)
            .all()
        )

    def create(self, db: Session, obj_in: DoctorCreate, image: Optional[str] = None) -> Doctor:
        db_obj = Doctor(
            name=obj_in.name,
            email=obj_in.email.lower(),
            hashed_password=get_password_hash(obj_in.password),
            image=image,
            speciality=obj_in.speciality,
            degree=obj_in.degree,
            experience=obj_in.experience,
            about=obj_in.about,
            fees=obj_in.fees,
            address=obj_in.address.model_dump(),
            available=True,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def toggle_availability(self, db: Session, *, db_obj: Doctor) -> Doctor:
        db_obj.available = not db_obj.available
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


doctor = CRUDDoctor()
