"""Extract plain text from uploaded CV bytes. In-memory only, never raises."""
import base64
import io
import logging
from typing import Optional

from PyPDF2 import PdfReader

from cv_screener.core import prompts
from cv_screener.core.config import settings
from cv_screener.services.ai_orchestrator import AIOrchestrator, AIDomain

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


def normalize_media_type(media_type: Optional[str]) -> str:
    """'Image/PNG; charset=binary' -> 'image/png'."""
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


def is_supported_media_type(media_type: Optional[str]) -> bool:
    normalized = normalize_media_type(media_type)
    return normalized.startswith("image/") or normalized == PDF_MEDIA_TYPE


def extract_pdf_text(data: bytes) -> str:
    """Join the text of every page. Raises on malformed PDFs."""
    reader = PdfReader(io.BytesIO(data))
    parts = []
    for page in reader.pages:
        parts.append(page.extract_text() or "")
    return "\n".join(parts)


def extract_image_text(data: bytes, media_type: str) -> str:
    """OCR through the vision-capable model. Raises AIError on failure."""
    encoded = base64.b64encode(data).decode("ascii")
    messages = [{
        "role": "user",
        "content": [
            {"type": "text", "text": prompts.OCR_INSTRUCTION},
            {"type": "image_url", "image_url": {"url": f"data:{media_type};base64,{encoded}"}},
        ],
    }]
    return AIOrchestrator.call_model(
        messages,
        temperature=0.0,
        domain=AIDomain.OCR,
        model_name=settings.ai.vision_model_name,
    )


def extract_text(data: bytes, media_type: Optional[str]) -> Optional[str]:
    """
    Extract text from a file given its declared media type.

    Returns None when the type is unsupported, the underlying call fails,
    or nothing but whitespace came back. One bad file must not abort a batch,
    so every failure is logged here and reported as None.
    """
    if not is_supported_media_type(media_type):
        logger.info(f"Skipping extraction for unsupported media type '{media_type}'")
        return None

    normalized = normalize_media_type(media_type)
    try:
        if normalized == PDF_MEDIA_TYPE:
            text = extract_pdf_text(data)
        else:
            text = extract_image_text(data, normalized)
    except Exception as e:
        logger.error(f"Text extraction failed ({normalized}): {e}")
        return None

    if not text or not text.strip():
        logger.warning(f"Extraction produced no text ({normalized})")
        return None
    return text.strip()
