"""Thin async wrapper around ``google.generativeai`` with quota-aware outcomes."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from tools.rate_limit import SlidingWindowRateLimiter
from wardrobe_app.config import DEFAULT_GEMINI_MODEL
from wardrobe_app.logging_config import log_event

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 20.0
RATE_LIMIT_KEY = "gemini"


@dataclass(frozen=True)
class GeminiReply:
    """Reply text, or ``text=None`` with a reason when the call was unavailable."""

    text: Optional[str] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.text is not None


class GeminiClient:
    """Shared Gemini access used by the stylist and the garment classifier.

    A missing API key, client-side rate limiting, quota errors, timeouts and
    any other Google API failure are reported as an unavailable reply rather
    than raised.
    """

    def __init__(
        self,
        api_key: str | None,
        model_name: str = DEFAULT_GEMINI_MODEL,
        rate_limiter: SlidingWindowRateLimiter | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        model: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.rate_limiter = rate_limiter
        self.timeout_seconds = timeout_seconds
        self._model = model

    @property
    def available(self) -> bool:
        return self._model is not None or bool(self.api_key)

    def _get_model(self) -> Any:
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def _unavailable(self, call_name: str, reason: str) -> GeminiReply:
        log_event(LOGGER, logging.WARNING, "gemini_unavailable", call=call_name, reason=reason)
        return GeminiReply(reason=reason)

    async def generate(self, contents: Sequence[Any], call_name: str = "gemini") -> GeminiReply:
        if not self.available:
            return self._unavailable(call_name, "missing_api_key")
        if self.rate_limiter and not self.rate_limiter.try_acquire(RATE_LIMIT_KEY):
            return self._unavailable(call_name, "rate_limited")

        model = self._get_model()
        try:
            response = await asyncio.wait_for(
                model.generate_content_async(list(contents)),
                timeout=self.timeout_seconds,
            )
            text = response.text
        except (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests):
            return self._unavailable(call_name, "quota_exceeded")
        except asyncio.TimeoutError:
            return self._unavailable(call_name, "timeout")
        except google_exceptions.GoogleAPIError as exc:
            return self._unavailable(call_name, f"api_error:{type(exc).__name__}")
        except OSError:
            return self._unavailable(call_name, "network_error")
        except ValueError:
            # response.text raises ValueError when the reply was blocked or empty.
            return self._unavailable(call_name, "blocked")

        log_event(LOGGER, logging.INFO, "gemini_reply", call=call_name, chars=len(text or ""))
        return GeminiReply(text=text or "")


__all__ = ["GeminiClient", "GeminiReply"]
