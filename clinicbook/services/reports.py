"""
Patient report store: PDF metadata in the database, bytes in the blob store.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from clinicbook import crud
from clinicbook.core.exceptions import ClinicBookError, NotFound, UpstreamFailure, ValidationFailed
from clinicbook.models.report import Report
from clinicbook.models.user import User
from clinicbook.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
REPORTS_FOLDER = "reports"


def upload(
    db: Session,
    store: BlobStore,
    *,
    user: User,
    report_name: Optional[str],
    description: Optional[str],
    filename: Optional[str],
    content_type: Optional[str],
    data: Optional[bytes],
) -> Report:
    if not report_name or not description or data is None:
        raise ValidationFailed("Missing Details")
    if content_type != PDF_MEDIA_TYPE:
        raise ValidationFailed("Only PDF files are allowed")

    try:
        pdf_url = store.upload(data, filename or "report.pdf", folder=REPORTS_FOLDER, content_type=PDF_MEDIA_TYPE)
    except ClinicBookError:
        raise
    except Exception as e:
        logger.error(f"Storing report for user {user.id} failed: {e}")
        raise UpstreamFailure("Could not store the report")
    report = crud.report.create(
        db, user_id=user.id, report_name=report_name, description=description, pdf_url=pdf_url
    )
    logger.info(f"Report {report.report_id} uploaded for user {user.id}")
    return report


def list_reports(db: Session, *, user: User) -> List[Report]:
    return crud.report.list_for_user(db, user_id=user.id)


def get_report(db: Session, *, user: User, report_id: str) -> Report:
    report = crud.report.get_for_user(db, user_id=user.id, report_id=report_id)
    if not report:
        raise NotFound("Report not found")
    return report


def get_report_by_index(db: Session, *, user: User, index: int) -> Report:
    report = crud.report.get_by_index(db, user_id=user.id, index=index)
    if not report:
        raise NotFound("Report not found")
    return report


def get_report_by_url(db: Session, *, user: User, pdf_url: str) -> Report:
    report = crud.report.get_by_url(db, user_id=user.id, pdf_url=pdf_url)
    if not report:
        raise NotFound("Report not found")
    return report


def delete(db: Session, store: BlobStore, *, report: Report) -> None:
    crud.report.remove(db, db_obj=report)
    try:
        store.delete(report.pdf_url)
    except Exception as e:
        # The record is gone; an orphaned blob is only wasted space
        logger.warning(f"Could not delete stored file for report {report.report_id}: {e}")
    logger.info(f"Report {report.report_id} deleted for user {report.user_id}")


def read_pdf(store: BlobStore, report: Report) -> bytes:
    try:
        return store.fetch(report.pdf_url)
    except ClinicBookError:
        raise
    except Exception as e:
        logger.error(f"Fetching report {report.report_id} failed: {e}")
        raise UpstreamFailure("Could not fetch the report")
