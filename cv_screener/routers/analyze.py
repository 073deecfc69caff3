import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from cv_screener.core.exceptions import InvalidRequestError
from cv_screener.database import get_db, get_session_factory
from cv_screener.models.profile import Profile
from cv_screener.routers.auth_deps import get_caller
from cv_screener.schemas.submission import SubmissionAccepted
from cv_screener.services.submission_service import SubmissionService
from cv_screener.services.submission_worker import SubmissionWorker, UploadedCV

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=SubmissionAccepted)
async def analyze_cvs(
    background_tasks: BackgroundTasks,
    files: Optional[List[UploadFile]] = File(None),
    keywords: Optional[str] = Form(None),
    keyword_list_id: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    caller: Optional[Profile] = Depends(get_caller),
    session_factory=Depends(get_session_factory),
):
    """
    Accept a batch of CVs (PDF or images) for screening against job keywords.
    Returns the submission id immediately; poll /results/{submissionId} for outcomes.
    """
    if not files:
        raise InvalidRequestError("No files were uploaded.", error_code="NO_FILES")

    service = SubmissionService(db)
    resolved_keywords = service.resolve_keywords(caller, keywords, keyword_list_id)

    uploads = []
    for upload in files:
        uploads.append(UploadedCV(
            filename=upload.filename or "unnamed",
            content_type=upload.content_type,
            data=await upload.read(),
        ))

    submission = service.create_submission(resolved_keywords, file_count=len(uploads), caller=caller)

    worker = SubmissionWorker(session_factory=session_factory)
    background_tasks.add_task(worker.run, submission.id, uploads, resolved_keywords)
    logger.info(f"Submission {submission.id} accepted with {len(uploads)} file(s); processing in background")

    return SubmissionAccepted(submission_id=submission.id)
