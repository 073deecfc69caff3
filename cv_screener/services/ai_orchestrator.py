import json
import logging
from typing import Any, Dict, List, Optional

import requests

from cv_screener.core.config import settings
from cv_screener.core.exceptions import AIError, AIKillSwitchError

logger = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"


class AIDomain:
    OCR = "ocr"
    CV_ANALYSIS = "cv_analysis"
    GENERAL = "general"


class AIOrchestrator:
    @staticmethod
    def _do_call(
        messages: List[Dict[str, Any]],
        model_name: str,
        temperature: float = 0.2,
    ) -> str:
        """Internal method to perform the actual API call. Single attempt, no retries."""
        logger.info(f"Calling AI Model: {model_name}")

        try:
            response = requests.post(
                url=OPENROUTER_URL,
                headers={
                    "Authorization": f"Bearer {settings.ai.openrouter_api_key}",
                    "Content-Type": "application/json",
                },
                data=json.dumps({
                    "model": model_name,
                    "messages": messages,
                    "temperature": temperature
                }),
                timeout=settings.ai.timeout_seconds
            )
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
            if not isinstance(content, str):
                raise AIError("AI service returned no text content.")
            return content

        except AIError:
            raise
        except requests.exceptions.Timeout:
            logger.error("AI service timeout.")
            raise AIError("AI service reached timeout limit.")
        except requests.exceptions.HTTPError as e:
            logger.error(f"AI service HTTP error: {e}")
            raise AIError(f"AI service returned error: {e.response.status_code}")
        except Exception as e:
            logger.exception("Unexpected error during AI call.")
            raise AIError(f"AI service error: {str(e)}")

    @classmethod
    def call_model(
        cls,
        messages: List[Dict[str, Any]],
        temperature: Optional[float] = None,
        domain: str = AIDomain.GENERAL,
        model_name: Optional[str] = None,
    ) -> str:
        """
        Centralized AI model caller with kill-switch and configuration checks.
        Raises AIError / AIKillSwitchError; callers decide whether to degrade.
        """
        logger.info(f"AI Coordination Request | Domain: {domain}")

        if settings.ai.kill_switch:
            logger.warning("AI Kill-switch is active. Blocking request.")
            raise AIKillSwitchError()

        if not settings.ai.openrouter_api_key:
            logger.error("OpenRouter API Key missing.")
            raise AIError("AI service configuration error.")

        return cls._do_call(
            messages,
            model_name or settings.ai.model_name,
            settings.ai.temperature if temperature is None else temperature,
        )
