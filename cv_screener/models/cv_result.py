from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from cv_screener.database import Base


class CvResult(Base):
    __tablename__ = "cv_results"

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(String(36), ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True)
    original_filename = Column(String, nullable=False)
    ats_score = Column(Text, nullable=True)  # model-supplied text, e.g. "85%"
    candidate_name = Column(String, nullable=True)
    candidate_email = Column(String, nullable=True)
    candidate_phone = Column(String, nullable=True)
    full_text = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    submission = relationship("Submission", back_populates="cv_results")
    education = relationship("EducationDetail", cascade="all, delete-orphan", order_by="EducationDetail.id")
    experience = relationship("ExperienceDetail", cascade="all, delete-orphan", order_by="ExperienceDetail.id")
    skills = relationship("SkillDetail", cascade="all, delete-orphan", order_by="SkillDetail.id")


class EducationDetail(Base):
    __tablename__ = "education_details"

    id = Column(Integer, primary_key=True, index=True)
    cv_result_id = Column(Integer, ForeignKey("cv_results.id", ondelete="CASCADE"), nullable=False, index=True)
    institution = Column(Text)


class ExperienceDetail(Base):
    __tablename__ = "experience_details"

    id = Column(Integer, primary_key=True, index=True)
    cv_result_id = Column(Integer, ForeignKey("cv_results.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text)


class SkillDetail(Base):
    __tablename__ = "skill_details"

    id = Column(Integer, primary_key=True, index=True)
    cv_result_id = Column(Integer, ForeignKey("cv_results.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(Text)
    details = Column(Text)
