from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union

# Wire format uses camelCase keys; populate_by_name keeps snake_case usable in code.

class SubmissionAccepted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "success"
    submission_id: str = Field(alias="submissionId")

class ProcessingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "processing"
    submission_status: str = Field(alias="submissionStatus")

class SkillDetailResponse(BaseModel):
    category: Optional[str] = None
    details: Optional[str] = None

class CvResultSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    file_name: str = Field(alias="fileName")
    match_percentage: int = Field(alias="matchPercentage")

class CvResultDetail(CvResultSummary):
    candidate_name: Optional[str] = Field(default=None, alias="candidateName")
    candidate_email: Optional[str] = Field(default=None, alias="candidateEmail")
    candidate_phone: Optional[str] = Field(default=None, alias="candidatePhone")
    education: List[str] = []
    experience: List[str] = []
    skills: List[SkillDetailResponse] = []

class SubmissionResultsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "success"
    submission_status: str = Field(alias="submissionStatus")
    total_cvs: int = Field(alias="totalCVs")
    analysis_keywords: List[str] = Field(alias="analysisKeywords")
    # Detail first so detailed rows serialize with their extra fields
    results: List[Union[CvResultDetail, CvResultSummary]]
