from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime

class KeywordListCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    keywords: List[str] = Field(min_length=1)

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, value: List[str]) -> List[str]:
        cleaned = [k.strip() for k in value if k and k.strip()]
        if not cleaned:
            raise ValueError("At least one non-empty keyword is required")
        return cleaned

class KeywordListResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    keywords: List[str]
    created_at: Optional[datetime] = None

class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    credits: int
