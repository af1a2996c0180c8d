import re
from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from clinicbook.db.base import Base

class Report(Base):
    """A PDF uploaded by a patient. The file itself lives in the blob store."""

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)  # insertion order
    report_id = Column(String(32), unique=True, index=True, nullable=False, default=lambda: uuid4().hex)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    report_name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    pdf_url = Column(String, nullable=False)
    uploaded_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="reports")

    @property
    def download_filename(self) -> str:
        return re.sub(r"\s+", "_", self.report_name) + ".pdf"
