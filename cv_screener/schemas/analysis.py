"""
Decoded model output for one CV.

The model is asked for a fixed JSON shape but nothing guarantees it, so every
field is optional and every validator coerces instead of rejecting. List fields
keep their length so each supplied element maps to one detail row.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_text(value: Any) -> Optional[str]:
    """Best-effort conversion of an untrusted JSON value to a non-empty string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        parts = [p for p in (_to_text(v) for v in value) if p]
        return ", ".join(parts) or None
    if isinstance(value, dict):
        parts = [p for p in (_to_text(v) for v in value.values()) if p]
        return ", ".join(parts) or None
    return None


class SkillEntry(BaseModel):
    category: Optional[str] = None
    details: Optional[str] = None


class CvAnalysis(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ats: Optional[str] = Field(default=None, alias="ATS")
    name: Optional[str] = Field(default=None, alias="Name")
    phone: Optional[str] = Field(default=None, alias="Phone")
    mail: Optional[str] = Field(default=None, alias="Mail")
    education: List[Optional[str]] = Field(default_factory=list, alias="Edu")
    skills: List[SkillEntry] = Field(default_factory=list, alias="SKILLS")
    experience: List[Optional[str]] = Field(default_factory=list, alias="EXPERIENCE")

    @field_validator("ats", "name", "phone", "mail", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any) -> Optional[str]:
        if isinstance(value, (list, dict)):
            return None
        return _to_text(value)

    # List fields keep one entry per element supplied; unusable elements become None.

    @field_validator("education", "experience", mode="before")
    @classmethod
    def _coerce_text_list(cls, value: Any) -> List[Optional[str]]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [_to_text(item) for item in value]

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value: Any) -> List[dict]:
        if not isinstance(value, (list, tuple)):
            return []
        entries = []
        for item in value:
            if isinstance(item, (list, tuple)):
                category = _to_text(item[0]) if len(item) > 0 else None
                details = _to_text(list(item[1:])) if len(item) > 1 else None
            elif isinstance(item, dict):
                category = _to_text(item.get("category") or item.get("Category") or item.get("name"))
                details = _to_text(item.get("details") or item.get("Details"))
            else:
                category, details = _to_text(item), None
            entries.append({"category": category, "details": details})
        return entries
