from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
import uuid
from cv_screener.database import Base


class SubmissionStatus(str, enum.Enum):
    """
    Lifecycle of a batch:
    - PENDING: created by the request handler, worker not started yet
    - PROCESSING: worker is running the per-file pipeline
    - COMPLETED: every file has been attempted (some may have produced no result)
    """
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    keywords = Column(Text, nullable=False)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True, index=True)
    status = Column(Enum(SubmissionStatus), default=SubmissionStatus.PENDING, nullable=False)
    file_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    owner = relationship("Profile", back_populates="submissions")
    cv_results = relationship("CvResult", back_populates="submission", order_by="CvResult.id")

    def __repr__(self):
        return f"<Submission {self.id} ({self.status.value})>"
