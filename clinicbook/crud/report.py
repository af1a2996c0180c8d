from typing import List, Optional
from sqlalchemy.orm import Session

from clinicbook.models.report import Report


class CRUDReport:
    def list_for_user(self, db: Session, *, user_id: int) -> List[Report]:
        return db.query(Report).filter(Report.user_id == user_id).order_by(Report.id).all()

    def get_for_user(self, db: Session, *, user_id: int, report_id: str) -> Optional[Report]:
        return (
            db.query(Report)
            .filter(Report.user_id == user_id, Report.report_id == report_id)
            .first()
        )

    def get_by_index(self, db: Session, *, user_id: int, index: int) -> Optional[Report]:
        if index < 0:
            return None
        return (
            db.query(Report)
            .filter(Report.user_id == user_id)
            .order_by(Report.id)
            .offset(index)
            .first()
        )

    def get_by_url(self, db: Session, *, user_id: int, pdf_url: str) -> Optional[Report]:
        return (
            db.query(Report)
            .filter(Report.user_id == user_id, Report.pdf_url == pdf_url)
            .first()
        )

    def create(self, db: Session, *, user_id: int, report_name: str, description: str, pdf_url: str) -> Report:
        db_obj = Report(
            user_id=user_id,
            report_name=report_name,
            description=description,
            pdf_url=pdf_url,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, db_obj: Report) -> Report:
        db.delete(db_obj)
        db.commit()
        return db_obj


report = CRUDReport()
