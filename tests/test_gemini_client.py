"""Gemini client outcome mapping, stylist and classifier tests with a fake model."""

from __future__ import annotations

import asyncio

from google.api_core import exceptions as google_exceptions

from logic.context_synthesizer import synthesize_stylist_context
from tools.garment_classifier import GeminiGarmentClassifier
from tools.gemini_client import GeminiClient
from tools.gemini_stylist import STATUS_EMPTY, STATUS_OK, STATUS_UNAVAILABLE, GeminiStylist
from tools.rate_limit import SlidingWindowRateLimiter


class _Reply:
    def __init__(self, text: str) -> None:
        self.text = text


class _FakeModel:
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list = []

    async def generate_content_async(self, contents):
        self.calls.append(contents)
        if self.error is not None:
            raise self.error
        return _Reply(self.text)


def _generate(client: GeminiClient):
    return asyncio.run(client.generate(["hello"], call_name="test"))


def test_missing_key_is_unavailable() -> None:
    reply = _generate(GeminiClient(api_key=None))

    assert not reply.ok
    assert reply.reason == "missing_api_key"


def test_quota_and_api_errors_are_mapped() -> None:
    quota = GeminiClient("key", model=_FakeModel(error=google_exceptions.ResourceExhausted("quota")))
    denied = GeminiClient("key", model=_FakeModel(error=google_exceptions.PermissionDenied("nope")))
    blocked = GeminiClient("key", model=_FakeModel(error=ValueError("blocked")))

    assert _generate(quota).reason == "quota_exceeded"
    assert _generate(denied).reason == "api_error:PermissionDenied"
    assert _generate(blocked).reason == "blocked"


def test_rate_limiter_short_circuits_calls() -> None:
    model = _FakeModel(text="{}")
    limiter = SlidingWindowRateLimiter(requests_per_window=1, clock=lambda: 0.0)
    client = GeminiClient("key", rate_limiter=limiter, model=model)

    assert _generate(client).ok
    assert _generate(client).reason == "rate_limited"
    assert len(model.calls) == 1


def test_timeout_is_reported() -> None:
    class _SlowModel:
        async def generate_content_async(self, contents):
            await asyncio.sleep(1)

    client = GeminiClient("key", model=_SlowModel(), timeout_seconds=0.01)

    assert _generate(client).reason == "timeout"


def test_stylist_parses_outfits_and_reports_failures() -> None:
    context = synthesize_stylist_context([], None, None, "casual")
    good = GeminiStylist(GeminiClient("key", model=_FakeModel('{"outfits": [{"name": "A", "item_ids": [1, 2]}]}')))
    empty = GeminiStylist(GeminiClient("key", model=_FakeModel('{"outfits": []}')))
    prose = GeminiStylist(GeminiClient("key", model=_FakeModel("Sorry, no ideas today.")))

    outcome = asyncio.run(good.suggest(context))
    assert outcome.status == STATUS_OK
    assert outcome.outfits[0].item_ids == [1, 2]
    assert asyncio.run(empty.suggest(context)).status == STATUS_EMPTY
    unparseable = asyncio.run(prose.suggest(context))
    assert unparseable.status == STATUS_UNAVAILABLE
    assert unparseable.reason == "unparseable"


def test_stylist_prompt_mentions_occasion_and_history() -> None:
    model = _FakeModel('{"outfits": []}')
    context = synthesize_stylist_context([], None, None, "business", ["1,2"])

    asyncio.run(GeminiStylist(GeminiClient("key", model=model)).suggest(context))

    (prompt,) = model.calls[0]
    assert "OCCASION: business" in prompt
    assert "1,2" in prompt


def test_classifier_sends_inline_image_and_parses_reply() -> None:
    model = _FakeModel('```json\n{"category": "shoes", "colors": ["brown"]}\n```')
    classifier = GeminiGarmentClassifier(GeminiClient("key", model=model))

    descriptor = asyncio.run(classifier.classify(b"img", "image/png"))

    assert descriptor.category == "shoes"
    image_part, prompt = model.calls[0]
    assert image_part == {"inline_data": {"mime_type": "image/png", "data": b"img"}}
    assert "garment classifier" in prompt


def test_classifier_returns_none_when_unavailable() -> None:
    classifier = GeminiGarmentClassifier(GeminiClient(api_key=None))

    assert asyncio.run(classifier.classify(b"img")) is None
    assert asyncio.run(classifier.classify(b"")) is None
