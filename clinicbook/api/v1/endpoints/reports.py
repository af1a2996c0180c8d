from typing import Any, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from clinicbook import models
from clinicbook.api import deps
from clinicbook.models.report import Report as ReportModel
from clinicbook.schemas.common import Envelope
from clinicbook.schemas.report import Report, ReportListResponse, ReportResponse
from clinicbook.services import reports as report_service
from clinicbook.services.blob_store import BlobStore

router = APIRouter()

FALLBACK_PDF_FILENAME = "report.pdf"


def content_disposition(filename: str) -> str:
    """
    Inline disposition with a latin-1 safe ``filename`` and the exact name as
    an RFC 5987 ``filename*`` parameter.
    """
    ascii_name = filename.encode("ascii", "ignore").decode("ascii")
    ascii_name = ascii_name.replace('"', "").replace("\\", "")
    if not ascii_name.rsplit(".", 1)[0].strip("_"):
        ascii_name = FALLBACK_PDF_FILENAME
    return f"inline; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _pdf_response(store: BlobStore, report: ReportModel) -> Response:
    return Response(
        content=report_service.read_pdf(store, report),
        media_type=report_service.PDF_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(report.download_filename)},
    )


@router.post("", response_model=ReportResponse)
def upload_report(
    *,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
    store: BlobStore = Depends(deps.get_blob_store),
    report_name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
) -> Any:
    """
    Upload a PDF report for the current patient.
    """
    report = report_service.upload(
        db,
        store,
        user=current_user,
        report_name=report_name,
        description=description,
        filename=file.filename if file else None,
        content_type=file.content_type if file else None,
        data=file.file.read() if file else None,
    )
    return ReportResponse(message="Report uploaded successfully", report=Report.model_validate(report))


@router.get("", response_model=ReportListResponse)
def list_reports(
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    reports = report_service.list_reports(db, user=current_user)
    return ReportListResponse(reports=[Report.model_validate(r) for r in reports])


@router.get("/pdf-by-url")
def read_pdf_by_url(
    *,
    db: Session = Depends(deps.get_db),
    pdf_url: str,
    current_user: models.User = Depends(deps.get_current_user),
    store: BlobStore = Depends(deps.get_blob_store),
) -> Any:
    """
    Relay a stored PDF by its locator. Only the caller's own reports are served.
    """
    report = report_service.get_report_by_url(db, user=current_user, pdf_url=pdf_url)
    return _pdf_response(store, report)


# Positional addressing, kept for older clients
@router.get("/by-index/{index}", response_model=ReportResponse)
def read_report_by_index(
    *,
    db: Session = Depends(deps.get_db),
    index: int,
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    report = report_service.get_report_by_index(db, user=current_user, index=index)
    return ReportResponse(report=Report.model_validate(report))


@router.get("/by-index/{index}/pdf")
def read_report_pdf_by_index(
    *,
    db: Session = Depends(deps.get_db),
    index: int,
    current_user: models.User = Depends(deps.get_current_user),
    store: BlobStore = Depends(deps.get_blob_store),
) -> Any:
    report = report_service.get_report_by_index(db, user=current_user, index=index)
    return _pdf_response(store, report)


@router.delete("/by-index/{index}", response_model=Envelope)
def delete_report_by_index(
    *,
    db: Session = Depends(deps.get_db),
    index: int,
    current_user: models.User = Depends(deps.get_current_user),
    store: BlobStore = Depends(deps.get_blob_store),
) -> Any:
    report = report_service.get_report_by_index(db, user=current_user, index=index)
    report_service.delete(db, store, report=report)
    return Envelope(message="Report deleted successfully")


@router.get("/{report_id}", response_model=ReportResponse)
def read_report(
    *,
    db: Session = Depends(deps.get_db),
    report_id: str,
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    report = report_service.get_report(db, user=current_user, report_id=report_id)
    return ReportResponse(report=Report.model_validate(report))


@router.get("/{report_id}/pdf")
def read_report_pdf(
    *,
    db: Session = Depends(deps.get_db),
    report_id: str,
    current_user: models.User = Depends(deps.get_current_user),
    store: BlobStore = Depends(deps.get_blob_store),
) -> Any:
    report = report_service.get_report(db, user=current_user, report_id=report_id)
    return _pdf_response(store, report)


@router.delete("/{report_id}", response_model=Envelope)
def delete_report(
    *,
    db: Session = Depends(deps.get_db),
    report_id: str,
    current_user: models.User = Depends(deps.get_current_user),
    store: BlobStore = Depends(deps.get_blob_store),
) -> Any:
    report = report_service.get_report(db, user=current_user, report_id=report_id)
    report_service.delete(db, store, report=report)
    return Envelope(message="Report deleted successfully")
