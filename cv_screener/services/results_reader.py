from typing import List, Union

from sqlalchemy.orm import selectinload

from cv_screener.core.exceptions import NotFoundError
from cv_screener.models.cv_result import CvResult
from cv_screener.models.submission import Submission, SubmissionStatus
from cv_screener.schemas.submission import (
    CvResultDetail,
    CvResultSummary,
    ProcessingResponse,
    SkillDetailResponse,
    SubmissionResultsResponse,
)
from cv_screener.services.base import BaseService
from cv_screener.services.cv_analyzer import parse_ats_score


def split_keywords(keywords: str) -> List[str]:
    return [k.strip() for k in (keywords or "").split(",") if k.strip()]


class ResultsReader(BaseService):
    """Read-only view of a submission's accumulated results."""

    def load_submission(self, submission_id: str, include_details: bool = False) -> Submission:
        options = [selectinload(Submission.cv_results)]
        if include_details:
            options = [
                selectinload(Submission.cv_results).selectinload(CvResult.education),
                selectinload(Submission.cv_results).selectinload(CvResult.experience),
                selectinload(Submission.cv_results).selectinload(CvResult.skills),
            ]
        submission = (
            self.db.query(Submission)
            .options(*options)
            .filter(Submission.id == submission_id)
            .first()
        )
        if submission is None:
            raise NotFoundError("Submission not found")
        return submission

    def summarize(
        self, submission: Submission, include_details: bool = False
    ) -> Union[ProcessingResponse, SubmissionResultsResponse]:
        """
        No results and the worker not finished -> processing.
        A COMPLETED submission always reports success, even with zero results.
        """
        cv_results = list(submission.cv_results)
        if not cv_results and submission.status != SubmissionStatus.COMPLETED:
            return ProcessingResponse(submission_status=submission.status.value)

        return SubmissionResultsResponse(
            submission_status=submission.status.value,
            total_cvs=len(cv_results),
            analysis_keywords=split_keywords(submission.keywords),
            results=[self._to_result(cv, include_details) for cv in cv_results],
        )

    def get_results(
        self, submission_id: str, include_details: bool = False
    ) -> Union[ProcessingResponse, SubmissionResultsResponse]:
        return self.summarize(self.load_submission(submission_id, include_details), include_details)

    @staticmethod
    def _to_result(cv: CvResult, include_details: bool) -> CvResultSummary:
        summary = dict(
            id=cv.id,
            file_name=cv.original_filename,
            match_percentage=parse_ats_score(cv.ats_score),
        )
        if not include_details:
            return CvResultSummary(**summary)
        return CvResultDetail(
            **summary,
            candidate_name=cv.candidate_name,
            candidate_email=cv.candidate_email,
            candidate_phone=cv.candidate_phone,
            education=[e.institution for e in cv.education if e.institution],
            experience=[e.description for e in cv.experience if e.description],
            skills=[
                SkillDetailResponse(category=s.category, details=s.details)
                for s in cv.skills
                if s.category or s.details
            ],
        )
