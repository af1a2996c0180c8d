from typing import List
from datetime import datetime
from pydantic import BaseModel

from clinicbook.schemas.common import Envelope

class Report(BaseModel):
    report_id: str
    report_name: str
    description: str
    pdf_url: str
    uploaded_at: datetime

    class Config:
        from_attributes = True

class ReportResponse(Envelope):
    report: Report

class ReportListResponse(Envelope):
    reports: List[Report]
