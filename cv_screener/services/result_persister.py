from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from cv_screener.core.config import settings
from cv_screener.models.cv_result import CvResult, EducationDetail, ExperienceDetail, SkillDetail
from cv_screener.schemas.analysis import CvAnalysis
from cv_screener.services.base import BaseService
from cv_screener.services.cv_analyzer import parse_ats_score

# Marker for "read the threshold from settings"; None is a meaningful value (no gating).
FROM_SETTINGS = object()


class ResultPersister(BaseService):
    """
    Writes one analyzed CV: the primary CvResult row, then (policy permitting)
    its education / experience / skill rows. The two writes are separate commits.
    """

    def __init__(self, db, detail_threshold=FROM_SETTINGS):
        super().__init__(db)
        if detail_threshold is FROM_SETTINGS:
            detail_threshold = settings.pipeline.detail_score_threshold
        self.detail_threshold: Optional[int] = detail_threshold

    def should_store_details(self, score: int) -> bool:
        if self.detail_threshold is None:
            return True
        return score > self.detail_threshold

    def persist(
        self,
        submission_id: str,
        file_name: str,
        analysis: CvAnalysis,
        extracted_text: str,
    ) -> Optional[int]:
        """Returns the new CvResult id, or None if the primary insert failed."""
        cv_result = CvResult(
            submission_id=submission_id,
            original_filename=file_name,
            ats_score=analysis.ats,
            candidate_name=analysis.name,
            candidate_email=analysis.mail,
            candidate_phone=analysis.phone,
            full_text=extracted_text,
        )
        self.db.add(cv_result)
        try:
            self.commit()
        except SQLAlchemyError as e:
            self._logger.error(f"Error saving main CV data for {file_name}: {e}")
            return None
        cv_result_id = cv_result.id

        score = parse_ats_score(analysis.ats)
        if not self.should_store_details(score):
            self._logger.info(
                f"CV {cv_result_id} ({file_name}) scored {score}, at or below "
                f"threshold {self.detail_threshold}; details not stored"
            )
            return cv_result_id

        details = (
            [EducationDetail(cv_result_id=cv_result_id, institution=item) for item in analysis.education]
            + [ExperienceDetail(cv_result_id=cv_result_id, description=item) for item in analysis.experience]
            + [
                SkillDetail(cv_result_id=cv_result_id, category=skill.category, details=skill.details)
                for skill in analysis.skills
            ]
        )
        if not details:
            return cv_result_id

        self.db.add_all(details)
        try:
            self.commit()
        except SQLAlchemyError as e:
            # The committed CvResult stands without its details
            self._logger.error(f"Error saving detail rows for CV {cv_result_id} ({file_name}): {e}")
        return cv_result_id
