"""
Caller identity for the authenticated variant.
A profile carries its remaining analysis credits and the hash of its API token.
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from cv_screener.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    credits = Column(Integer, default=0, nullable=False)
    api_token_hash = Column(String(64), unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    keyword_lists = relationship("KeywordList", back_populates="owner", cascade="all, delete-orphan")
    submissions = relationship("Submission", back_populates="owner")

    def __repr__(self):
        return f"<Profile {self.email} credits={self.credits}>"
