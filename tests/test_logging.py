import json
import logging

from cv_screener.core.logging import (
    CustomJsonFormatter,
    request_id_var,
    submission_context,
    submission_id_var,
)
from cv_screener.services import submission_worker
from cv_screener.services.submission_worker import SubmissionWorker, UploadedCV


def _format(message="hello"):
    formatter = CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)")
    record = logging.LogRecord("cv_screener.test", logging.WARNING, __file__, 1, message, None, None)
    return json.loads(formatter.format(record))


class SubmissionIdRecorder(logging.Handler):
    def __init__(self):
        super().__init__()
        self.seen = []

    def emit(self, record):
        self.seen.append(submission_id_var.get())


def test_formatter_adds_correlation_fields():
    token = request_id_var.set("req-1")
    try:
        with submission_context("sub-1"):
            line = _format()
    finally:
        request_id_var.reset(token)

    assert line["message"] == "hello"
    assert line["level"] == "WARNING"
    assert line["request_id"] == "req-1"
    assert line["submission_id"] == "sub-1"
    assert "timestamp" in line

def test_formatter_omits_unset_fields():
    line = _format()
    assert "request_id" not in line
    assert "submission_id" not in line

def test_submission_context_is_reset():
    with submission_context("sub-1"):
        assert submission_id_var.get() == "sub-1"
    assert submission_id_var.get() == ""

def test_worker_threads_log_with_submission_id(session_factory, fake_ai, fake_pdf):
    recorder = SubmissionIdRecorder()
    submission_worker.logger.addHandler(recorder)
    submission_worker.logger.setLevel(logging.INFO)
    try:
        SubmissionWorker(session_factory=session_factory, processing_mode="concurrent", max_workers=2).run(
            "missing-submission",
            [UploadedCV("a.docx", "application/msword", b"x"), UploadedCV("b.docx", "application/msword", b"y")],
            "python",
        )
    finally:
        submission_worker.logger.removeHandler(recorder)
        submission_worker.logger.setLevel(logging.NOTSET)

    assert recorder.seen
    assert set(recorder.seen) == {"missing-submission"}
