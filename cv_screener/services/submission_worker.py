import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cv_screener.core.config import settings
from cv_screener.core.logging import submission_context
from cv_screener.database import SessionLocal
from cv_screener.models.submission import Submission, SubmissionStatus
from cv_screener.services.cv_analyzer import analyze_cv
from cv_screener.services.result_persister import FROM_SETTINGS, ResultPersister
from cv_screener.services.text_extractor import extract_text

logger = logging.getLogger(__name__)

SEQUENTIAL = "sequential"
CONCURRENT = "concurrent"


@dataclass(frozen=True)
class UploadedCV:
    """File bytes read during the request, handed to the background worker."""
    filename: str
    content_type: Optional[str]
    data: bytes


class SubmissionWorker:
    """
    Runs extraction -> analysis -> persistence for every file of a submission
    after the HTTP response has been sent.

    Work lives only in this process: a restart mid-batch drops the remaining
    files and leaves the submission PENDING or PROCESSING.
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], Session]] = None,
        processing_mode: Optional[str] = None,
        max_workers: Optional[int] = None,
        detail_threshold=FROM_SETTINGS,
    ):
        self.session_factory = session_factory or SessionLocal
        self.processing_mode = (processing_mode or settings.pipeline.processing_mode).lower()
        if self.processing_mode not in (SEQUENTIAL, CONCURRENT):
            raise ValueError(f"Unknown processing mode: {self.processing_mode}")
        self.max_workers = max(1, max_workers or settings.pipeline.max_workers)
        self.detail_threshold = detail_threshold

    def run(self, submission_id: str, files: Sequence[UploadedCV], keywords: str) -> List[Optional[int]]:
        """Process the whole batch. Returns the CvResult id (or None) per file, in input order."""
        with submission_context(submission_id):
            logger.info(f"Submission {submission_id}: processing {len(files)} file(s) [{self.processing_mode}]")
            self._set_status(submission_id, SubmissionStatus.PROCESSING)

            if self.processing_mode == CONCURRENT and len(files) > 1:
                pool_size = min(self.max_workers, len(files))
                with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="cv-pipeline") as pool:
                    outcomes = list(pool.map(
                        lambda upload: self._process_file_safely(submission_id, keywords, upload),
                        files,
                    ))
            else:
                outcomes = [self._process_file_safely(submission_id, keywords, upload) for upload in files]

            self._set_status(submission_id, SubmissionStatus.COMPLETED)
            stored = sum(1 for outcome in outcomes if outcome is not None)
            logger.info(f"Submission {submission_id}: completed, {stored}/{len(files)} CV(s) stored")
        return outcomes

    def process_file(self, submission_id: str, keywords: str, upload: UploadedCV) -> Optional[int]:
        text = extract_text(upload.data, upload.content_type)
        if not text:
            logger.info(f"Submission {submission_id}: no text from {upload.filename}, skipped")
            return None

        analysis = analyze_cv(text, keywords)
        if analysis is None:
            logger.info(f"Submission {submission_id}: analysis failed for {upload.filename}, skipped")
            return None

        db = self.session_factory()
        try:
            persister = ResultPersister(db, detail_threshold=self.detail_threshold)
            return persister.persist(submission_id, upload.filename, analysis, text)
        finally:
            db.close()

    def _process_file_safely(self, submission_id: str, keywords: str, upload: UploadedCV) -> Optional[int]:
        # A single file never fails the batch. Pool threads do not inherit the caller's context.
        with submission_context(submission_id):
            try:
                return self.process_file(submission_id, keywords, upload)
            except Exception:
                logger.exception(f"Submission {submission_id}: unexpected error processing {upload.filename}")
                return None

    def _set_status(self, submission_id: str, status: SubmissionStatus):
        db = self.session_factory()
        try:
            submission = db.get(Submission, submission_id)
            if submission is None:
                logger.error(f"Submission {submission_id} not found while setting status {status.value}")
                return
            submission.status = status
            if status == SubmissionStatus.COMPLETED:
                submission.completed_at = datetime.now(timezone.utc)
            try:
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to mark submission {submission_id} {status.value}: {e}")
        finally:
            db.close()
