from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from cv_screener.core.config import settings
from cv_screener.database import get_db
from cv_screener.dependencies import validate_owner_access
from cv_screener.models.profile import Profile
from cv_screener.routers.auth_deps import get_caller
from cv_screener.schemas.submission import ProcessingResponse, SubmissionResultsResponse
from cv_screener.services.results_reader import ResultsReader

router = APIRouter()


@router.get(
    "/results/{submission_id}",
    response_model=SubmissionResultsResponse,
    responses={status.HTTP_202_ACCEPTED: {"model": ProcessingResponse}},
)
def get_results(
    submission_id: str,
    include_details: bool = Query(False),
    db: Session = Depends(get_db),
    caller: Optional[Profile] = Depends(get_caller),
):
    reader = ResultsReader(db)
    submission = reader.load_submission(submission_id, include_details=include_details)

    if settings.require_auth and submission.user_id is not None:
        validate_owner_access(caller, submission.user_id)

    outcome = reader.summarize(submission, include_details=include_details)
    status_code = status.HTTP_202_ACCEPTED if isinstance(outcome, ProcessingResponse) else status.HTTP_200_OK
    return JSONResponse(status_code=status_code, content=outcome.model_dump(mode="json", by_alias=True))
