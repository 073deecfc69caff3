import json
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from cv_screener.core.exceptions import (
    AppException,
    AuthenticationError,
    InsufficientCreditsError,
    InvalidRequestError,
    NotFoundError,
)
from cv_screener.dependencies import validate_owner_access
from cv_screener.models.keyword_list import KeywordList
from cv_screener.models.profile import Profile
from cv_screener.models.submission import Submission, SubmissionStatus
from cv_screener.services.base import BaseService


def parse_keywords_field(raw: Optional[str]) -> str:
    """
    The keywords form field is either a plain string ("python, sql")
    or a JSON array of strings; arrays are joined with ", ".
    """
    if raw is None:
        return ""
    text = raw.strip()
    if text.startswith("["):
        try:
            items = json.loads(text)
        except json.JSONDecodeError:
            return text
        if isinstance(items, list):
            return ", ".join(str(item).strip() for item in items if item is not None and str(item).strip())
    return text


class SubmissionService(BaseService):
    """Synchronous half of a batch request: validation, credit, Submission row."""

    def resolve_keywords(
        self,
        caller: Optional[Profile],
        keywords: Optional[str] = None,
        keyword_list_id: Optional[int] = None,
    ) -> str:
        if keyword_list_id is not None:
            if caller is None:
                raise AuthenticationError("Keyword lists require an authenticated caller")
            keyword_list = self.db.get(KeywordList, keyword_list_id)
            if keyword_list is None:
                raise NotFoundError("Keyword list not found")
            validate_owner_access(caller, keyword_list.user_id)
            resolved = ", ".join(str(k).strip() for k in (keyword_list.keywords or []) if str(k).strip())
        else:
            resolved = parse_keywords_field(keywords)

        if not resolved:
            raise InvalidRequestError("No keywords were provided.", error_code="MISSING_KEYWORDS")
        return resolved

    def create_submission(self, keywords: str, file_count: int, caller: Optional[Profile] = None) -> Submission:
        """
        Create the one Submission row for a batch. For an identified caller the
        credit decrement commits in the same transaction.
        """
        if caller is not None:
            self._consume_credit(caller.id)

        submission = Submission(
            keywords=keywords,
            user_id=caller.id if caller is not None else None,
            status=SubmissionStatus.PENDING,
            file_count=file_count,
        )
        self.db.add(submission)
        try:
            self.commit()
        except SQLAlchemyError as e:
            self._logger.error(f"Submission insert failed: {e}")
            raise AppException(
                "Failed to create submission record.",
                status_code=500,
                error_code="SUBMISSION_CREATE_FAILED",
            )
        self.db.refresh(submission)
        self._logger.info(f"Created submission {submission.id} ({file_count} file(s))")
        return submission

    def _consume_credit(self, profile_id: int):
        # Single conditional UPDATE: two concurrent requests cannot both pass a failing check
        result = self.db.execute(
            update(Profile)
            .where(Profile.id == profile_id, Profile.credits > 0)
            .values(credits=Profile.credits - 1)
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount == 0:
            self.db.rollback()
            self._logger.warning(f"Profile {profile_id} has no remaining credits")
            raise InsufficientCreditsError()
