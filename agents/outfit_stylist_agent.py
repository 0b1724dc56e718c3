"""Outfit composer: stylist call, validation, de-duplication and fallback."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from logic.context_synthesizer import StylistContext, synthesize_stylist_context
from logic.contextual_filtering import filter_by_occasion, filter_by_weather
from logic.duplicate_suppression import DuplicateSuppressor
from logic.outfit_builder import DEFAULT_MAX_OUTFITS, generate_basic
from logic.response_parsing import RawOutfit
from logic.structural_validation import MANDATORY_POLICY, check_for_policy
from memory.suggestion_history import SuggestionHistory
from models.garment_item import GarmentItem
from models.outfit import OutfitCandidate
from models.taxonomy import normalize_occasion
from models.user_profile import UserProfile
from models.weather import WeatherSnapshot
from tools.gemini_stylist import STATUS_OK, OutfitStylist, StylistOutcome
from wardrobe_app.logging_config import get_logger, log_event, operation_context

logger = get_logger(__name__)

SOURCE_STYLIST = "stylist"
SOURCE_FALLBACK = "fallback"
MIN_STYLIST_ITEMS = 2


@dataclass
class CompositionResult:
    """Candidates plus where they came from; only stylist output gets scored."""

    candidates: List[OutfitCandidate]
    source: str
    filtered_items: List[GarmentItem] = field(default_factory=list)
    debug: Dict[str, object] = field(default_factory=dict)


class OutfitStylistAgent:
    """Composes outfits with the external stylist and degrades to the fallback generator."""

    def __init__(
        self,
        stylist: Optional[OutfitStylist],
        suppressor: Optional[DuplicateSuppressor] = None,
        validation_policy: str = MANDATORY_POLICY,
        fallback_max_outfits: int = DEFAULT_MAX_OUTFITS,
    ) -> None:
        self.stylist = stylist
        self.suppressor = suppressor or DuplicateSuppressor()
        self.validation_policy = validation_policy
        self.fallback_max_outfits = fallback_max_outfits

    def _apply_filters(
        self, wardrobe: List[GarmentItem], occasion: Optional[str], weather: Optional[WeatherSnapshot]
    ) -> tuple[List[GarmentItem], Dict[str, object]]:
        usable = [item for item in wardrobe if item.is_usable]
        occasion_result = filter_by_occasion(usable, occasion)
        weather_result = filter_by_weather(occasion_result.items, weather)
        debug = {
            "usable_items": len(usable),
            "occasion_filter": occasion_result.debug,
            "weather_filter": weather_result.debug,
            "removed": {**occasion_result.removed, **weather_result.removed},
        }
        return weather_result.items, debug

    async def _ask_stylist(self, context: StylistContext) -> StylistOutcome:
        if len(context.wardrobe) < MIN_STYLIST_ITEMS:
            return StylistOutcome.empty("insufficient_wardrobe")
        if self.stylist is None:
            return StylistOutcome.unavailable("stylist_not_configured")
        return await self.stylist.suggest(context)

    def _to_candidate(self, raw: RawOutfit, occasion: Optional[str]) -> OutfitCandidate:
        return OutfitCandidate(
            name=raw.name,
            item_ids=list(raw.item_ids),
            occasion=normalize_occasion(raw.occasion) or occasion,
            confidence=raw.confidence,
            description=raw.description,
            styling_tips=raw.styling_tips,
            weather_note=raw.weather_note,
        )

    def _accept_stylist_outfits(
        self,
        outfits: List[RawOutfit],
        wardrobe: List[GarmentItem],
        filtered: List[GarmentItem],
        occasion: Optional[str],
        weather: Optional[WeatherSnapshot],
        history: SuggestionHistory,
    ) -> tuple[List[OutfitCandidate], Dict[str, int]]:
        allowed_ids = {item.id for item in filtered}
        temperature = weather.temperature if weather else None
        used_names: set[str] = set()
        accepted: List[OutfitCandidate] = []
        rejections: Dict[str, int] = {}

        for raw in outfits:
            candidate = self._to_candidate(raw, occasion)
            if not set(candidate.item_ids) <= allowed_ids:
                rejections["filtered_item"] = rejections.get("filtered_item", 0) + 1
                continue
            check = check_for_policy(self.validation_policy, candidate.item_ids, wardrobe, temperature)
            if not check:
                rejections[check.rule or "invalid"] = rejections.get(check.rule or "invalid", 0) + 1
                continue
            kept = self.suppressor.accept(candidate, history, used_names, wardrobe)
            if kept is None:
                rejections["duplicate"] = rejections.get("duplicate", 0) + 1
                continue
            accepted.append(kept)
        return accepted, rejections

    async def compose(
        self,
        wardrobe: List[GarmentItem],
        profile: Optional[UserProfile],
        weather: Optional[WeatherSnapshot],
        occasion: Optional[str],
        history: SuggestionHistory,
    ) -> CompositionResult:
        """Return stylist candidates that survive validation and de-duplication.

        When the stylist is unavailable, returns nothing usable, or every
        candidate is rejected, the deterministic fallback generator runs on
        the filtered wardrobe instead.
        """

        with operation_context("agent:stylist.compose") as correlation_id:
            occasion = normalize_occasion(occasion)
            filtered, debug = self._apply_filters(wardrobe, occasion, weather)
            context = synthesize_stylist_context(filtered, profile, weather, occasion, history.keys())
            debug["context"] = context.debug_summary

            outcome = await self._ask_stylist(context)
            debug["stylist_status"] = outcome.status
            if outcome.reason:
                debug["stylist_reason"] = outcome.reason

            if outcome.status == STATUS_OK:
                accepted, rejections = self._accept_stylist_outfits(
                    outcome.outfits, wardrobe, filtered, occasion, weather, history
                )
                debug["stylist_returned"] = len(outcome.outfits)
                debug["rejections"] = rejections
                if accepted:
                    log_event(
                        logger,
                        level=logging.INFO,
                        event="composition_completed",
                        source=SOURCE_STYLIST,
                        accepted=len(accepted),
                        correlation_id=correlation_id,
                    )
                    return CompositionResult(accepted, SOURCE_STYLIST, filtered, debug)

            fallback = generate_basic(filtered, history, occasion, max_outfits=self.fallback_max_outfits)
            log_event(
                logger,
                level=logging.INFO,
                event="composition_completed",
                source=SOURCE_FALLBACK,
                accepted=len(fallback),
                stylist_status=outcome.status,
                correlation_id=correlation_id,
            )
            return CompositionResult(fallback, SOURCE_FALLBACK, filtered, debug)


__all__ = ["OutfitStylistAgent", "CompositionResult", "SOURCE_STYLIST", "SOURCE_FALLBACK"]
