import pytest
from sqlalchemy.orm import sessionmaker

from cv_screener.core.exceptions import AIError
from cv_screener.database import build_engine, init_db
from cv_screener.models.cv_result import CvResult, SkillDetail
from cv_screener.models.submission import Submission, SubmissionStatus
from cv_screener.services.submission_worker import SubmissionWorker, UploadedCV

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _pending_submission(session_factory, keywords="python, sql", file_count=1):
    with session_factory() as db:
        submission = Submission(keywords=keywords, file_count=file_count)
        db.add(submission)
        db.commit()
        return submission.id


def test_pdf_and_docx_batch(session_factory, fake_ai, fake_pdf):
    submission_id = _pending_submission(session_factory, file_count=2)
    files = [
        UploadedCV("jane.pdf", PDF, b"Jane Doe, Python developer"),
        UploadedCV("john.docx", DOCX, b"PK\x03\x04"),
    ]

    outcomes = SubmissionWorker(session_factory=session_factory).run(submission_id, files, "python, sql")

    assert outcomes[0] is not None
    assert outcomes[1] is None
    with session_factory() as db:
        submission = db.get(Submission, submission_id)
        assert submission.status == SubmissionStatus.COMPLETED
        assert submission.completed_at is not None
        assert [cv.original_filename for cv in submission.cv_results] == ["jane.pdf"]
        assert submission.cv_results[0].ats_score == "70%"
        assert db.query(SkillDetail).count() == 2

def test_failed_analysis_does_not_stop_the_batch(session_factory, fake_ai, fake_pdf):
    def _analyze(cv_text):
        if "broken" in cv_text:
            raise AIError("AI service returned error: 500")
        return '{"ATS": "80%", "Name": "Ok"}'
    fake_ai.analyze = _analyze
    submission_id = _pending_submission(session_factory, file_count=3)
    files = [
        UploadedCV("a.pdf", PDF, b"first cv"),
        UploadedCV("b.pdf", PDF, b"broken cv"),
        UploadedCV("c.pdf", PDF, b"third cv"),
    ]

    outcomes = SubmissionWorker(session_factory=session_factory).run(submission_id, files, "python")

    assert [o is not None for o in outcomes] == [True, False, True]
    with session_factory() as db:
        names = [cv.original_filename for cv in db.query(CvResult).order_by(CvResult.id)]
        assert names == ["a.pdf", "c.pdf"]

def test_unreadable_files_leave_completed_submission_empty(session_factory, fake_ai, fake_pdf):
    submission_id = _pending_submission(session_factory)
    files = [UploadedCV("bad.pdf", PDF, b"%BAD bytes"), UploadedCV("blank.pdf", PDF, b"   ")]

    outcomes = SubmissionWorker(session_factory=session_factory).run(submission_id, files, "python")

    assert outcomes == [None, None]
    assert fake_ai.calls == []
    with session_factory() as db:
        submission = db.get(Submission, submission_id)
        assert submission.status == SubmissionStatus.COMPLETED
        assert submission.cv_results == []

def test_unexpected_error_in_one_file_is_contained(session_factory, fake_ai, fake_pdf, monkeypatch):
    worker = SubmissionWorker(session_factory=session_factory)
    real_process = worker.process_file

    def _process(submission_id, keywords, upload):
        if upload.filename == "boom.pdf":
            raise RuntimeError("boom")
        return real_process(submission_id, keywords, upload)

    monkeypatch.setattr(worker, "process_file", _process)
    submission_id = _pending_submission(session_factory)

    outcomes = worker.run(submission_id, [UploadedCV("boom.pdf", PDF, b"x"), UploadedCV("ok.pdf", PDF, b"y")], "python")

    assert outcomes[0] is None
    assert outcomes[1] is not None

def test_image_goes_through_ocr(session_factory, fake_ai):
    fake_ai.ocr_text = "Scanned CV of John Smith"
    seen = []

    def _analyze(cv_text):
        seen.append(cv_text)
        return '{"ATS": "50%"}'
    fake_ai.analyze = _analyze
    submission_id = _pending_submission(session_factory)

    SubmissionWorker(session_factory=session_factory).run(
        submission_id, [UploadedCV("scan.png", "image/png", b"\x89PNG")], "python"
    )

    assert seen == ["Scanned CV of John Smith"]
    with session_factory() as db:
        cv = db.query(CvResult).one()
        assert cv.full_text == "Scanned CV of John Smith"

def test_unknown_processing_mode_is_rejected(session_factory):
    with pytest.raises(ValueError):
        SubmissionWorker(session_factory=session_factory, processing_mode="parallel-ish")

def test_concurrent_mode_keeps_input_order(tmp_path, fake_ai, fake_pdf):
    # File-backed database so each worker thread gets its own connection
    engine = build_engine(f"sqlite:///{tmp_path / 'worker.db'}")
    init_db(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    fake_ai.analyze = lambda cv_text: '{"ATS": "%s%%"}' % cv_text.split()[-1]
    submission_id = _pending_submission(factory, file_count=4)
    files = [UploadedCV(f"cv{i}.pdf", PDF, f"candidate {60 + i}".encode()) for i in range(4)]

    worker = SubmissionWorker(session_factory=factory, processing_mode="concurrent", max_workers=2)
    outcomes = worker.run(submission_id, files, "python")

    assert all(outcome is not None for outcome in outcomes)
    with factory() as db:
        by_id = {cv.id: cv for cv in db.query(CvResult)}
        assert [by_id[o].original_filename for o in outcomes] == [f"cv{i}.pdf" for i in range(4)]
        assert [by_id[o].ats_score for o in outcomes] == ["60%", "61%", "62%", "63%"]
        assert db.get(Submission, submission_id).status == SubmissionStatus.COMPLETED
    engine.dispose()
