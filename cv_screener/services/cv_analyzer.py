import json
import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from cv_screener.core import prompts
from cv_screener.schemas.analysis import CvAnalysis
from cv_screener.services.ai_orchestrator import AIOrchestrator, AIDomain

logger = logging.getLogger(__name__)

MAX_PROMPT_CV_CHARS = 30000

_CODE_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def strip_code_fences(raw: str) -> str:
    return _CODE_FENCE_RE.sub("", raw).strip()


def parse_ats_score(value: Any) -> int:
    """
    Leading integer of an ATS score value.
    "85%" -> 85, " 70 %" -> 70, "85.5%" -> 85, anything unparseable -> 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else 0


def analyze_cv(cv_text: str, keywords: str) -> Optional[CvAnalysis]:
    """
    Score a CV against job keywords with the language model.
    Returns None if the call fails or the response is not a JSON object.
    """
    logger.info(f"Analyzing CV text ({len(cv_text)} chars)")

    messages = [
        {"role": "system", "content": prompts.CV_ANALYSIS_SYSTEM},
        {"role": "user", "content": prompts.get_prompt(
            prompts.CV_ANALYSIS_USER_TEMPLATE,
            keywords=keywords,
            cv_text=cv_text[:MAX_PROMPT_CV_CHARS],
        )},
    ]

    try:
        raw = AIOrchestrator.call_model(messages, domain=AIDomain.CV_ANALYSIS)
    except Exception as e:
        logger.error(f"CV analysis call failed: {e}")
        return None

    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.error(f"Failed to decode AI JSON response: {cleaned[:500]}")
        return None

    if not isinstance(data, dict):
        logger.error(f"AI response is not a JSON object (got {type(data).__name__})")
        return None

    try:
        return CvAnalysis.model_validate(data)
    except ValidationError as e:
        logger.error(f"AI response could not be decoded: {e}")
        return None
