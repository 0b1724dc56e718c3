"""Outfit stylist collaborator backed by Gemini."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from logic.context_synthesizer import StylistContext, build_stylist_prompt
from logic.response_parsing import RawOutfit, parse_stylist_response
from tools.gemini_client import GeminiClient
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_UNAVAILABLE = "unavailable"
STATUS_EMPTY = "empty"


@dataclass(frozen=True)
class StylistOutcome:
    """Result of one stylist call: ``ok`` with outfits, ``unavailable`` or ``empty``."""

    status: str
    outfits: List[RawOutfit] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def ok(cls, outfits: List[RawOutfit]) -> "StylistOutcome":
        return cls(status=STATUS_OK, outfits=list(outfits))

    @classmethod
    def unavailable(cls, reason: str) -> "StylistOutcome":
        return cls(status=STATUS_UNAVAILABLE, reason=reason)

    @classmethod
    def empty(cls, reason: str = "no_outfits") -> "StylistOutcome":
        return cls(status=STATUS_EMPTY, reason=reason)


class OutfitStylist(Protocol):
    async def suggest(self, context: StylistContext) -> StylistOutcome:
        ...


class GeminiStylist:
    """Ask Gemini for outfit combinations and normalise the reply."""

    def __init__(self, client: GeminiClient) -> None:
        self.client = client

    @instrument_call("stylist_suggest")
    async def suggest(self, context: StylistContext) -> StylistOutcome:
        reply = await self.client.generate([build_stylist_prompt(context)], call_name="stylist")
        if not reply.ok:
            return StylistOutcome.unavailable(reply.reason or "unavailable")

        outfits = parse_stylist_response(reply.text)
        if outfits is None:
            return StylistOutcome.unavailable("unparseable")
        if not outfits:
            return StylistOutcome.empty()
        return StylistOutcome.ok(outfits)


__all__ = [
    "STATUS_OK",
    "STATUS_UNAVAILABLE",
    "STATUS_EMPTY",
    "StylistOutcome",
    "OutfitStylist",
    "GeminiStylist",
]
