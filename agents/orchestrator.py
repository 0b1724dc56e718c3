"""Root orchestrator: the outfit-suggestion pipeline end to end."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from agents.outfit_stylist_agent import SOURCE_STYLIST, OutfitStylistAgent
from logic.outfit_scoring import DEFAULT_SUGGESTION_LIMIT, rank_candidates, score_and_rank
from logic.shopping_gaps import ShoppingGapAnalyzer
from memory.suggestion_history import SuggestionHistoryRegistry
from memory.user_profile import UserProfileService
from models.outfit import OutfitCandidate
from models.taxonomy import normalize_occasion
from models.user_profile import UserProfile
from models.weather import WeatherSnapshot
from tools.wardrobe_store import WardrobeStore
from tools.weather_provider import WeatherProvider
from wardrobe_app.logging_config import get_logger, log_event, operation_context

LOGGER = get_logger(__name__)

SOURCE_NONE = "none"
MIN_USABLE_ITEMS = 2


@dataclass
class SuggestionResponse:
    """Ranked outfits for one request plus the signals used to produce them."""

    outfits: List[OutfitCandidate]
    source: str
    weather: Optional[WeatherSnapshot] = None
    debug_summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "ok",
            "source": self.source,
            "outfits": [outfit.to_dict() for outfit in self.outfits],
            "weather": asdict(self.weather) if self.weather else None,
            "debug_summary": self.debug_summary,
        }


class OrchestratorAgent:
    """Loads wardrobe context and runs compose, score, rank and gap analysis."""

    def __init__(
        self,
        store: WardrobeStore,
        profile_service: UserProfileService,
        stylist_agent: OutfitStylistAgent,
        history_registry: SuggestionHistoryRegistry,
        weather_provider: Optional[WeatherProvider] = None,
        gap_analyzer: Optional[ShoppingGapAnalyzer] = None,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
        default_location: Optional[str] = None,
    ) -> None:
        self.store = store
        self.profile_service = profile_service
        self.stylist_agent = stylist_agent
        self.history_registry = history_registry
        self.weather_provider = weather_provider
        self.gap_analyzer = gap_analyzer
        self.suggestion_limit = suggestion_limit
        self.default_location = default_location

    async def _load_weather(self, profile: UserProfile) -> Optional[WeatherSnapshot]:
        location = profile.location or self.default_location
        if not location or self.weather_provider is None:
            return None
        return await asyncio.to_thread(self.weather_provider.get_current, location)

    async def get_outfit_suggestions(self, owner_id: str, occasion: Optional[str] = None) -> SuggestionResponse:
        """Run the full suggestion pipeline for one owner.

        Never raises for expected degradation: an unavailable stylist falls
        back to deterministic pairings and an undersized wardrobe yields an
        empty list.
        """

        with operation_context("agent:orchestrator.get_outfit_suggestions") as correlation_id:
            occasion = normalize_occasion(occasion)
            log_event(
                LOGGER,
                level=logging.INFO,
                event="agent_call_started",
                agent="orchestrator",
                method="get_outfit_suggestions",
                owner_id=owner_id,
                occasion=occasion,
                correlation_id=correlation_id,
            )

            wardrobe = self.store.list_items(owner_id)
            profile = self.profile_service.get_profile(owner_id)
            weather = await self._load_weather(profile)
            usable = [item for item in wardrobe if item.is_usable]
            debug_summary: Dict[str, Any] = {
                "wardrobe_size": len(wardrobe),
                "usable_items": len(usable),
                "occasion": occasion,
            }

            if len(usable) < MIN_USABLE_ITEMS:
                debug_summary["reason"] = "insufficient_wardrobe"
                log_event(
                    LOGGER,
                    level=logging.INFO,
                    event="agent_call_completed",
                    agent="orchestrator",
                    method="get_outfit_suggestions",
                    outfits=0,
                    correlation_id=correlation_id,
                )
                return SuggestionResponse([], SOURCE_NONE, weather, debug_summary)

            history = self.history_registry.for_owner(owner_id)
            composition = await self.stylist_agent.compose(wardrobe, profile, weather, occasion, history)
            debug_summary["composition"] = composition.debug

            if composition.source == SOURCE_STYLIST:
                ranked = score_and_rank(composition.candidates, wardrobe, weather, profile, self.suggestion_limit)
            else:
                ranked = rank_candidates(composition.candidates, self.suggestion_limit)

            if self.gap_analyzer is not None and ranked:
                record = self.gap_analyzer.analyze(owner_id, ranked, wardrobe, weather)
                debug_summary["shopping_recommendation"] = record is not None

            source = composition.source if ranked else SOURCE_NONE
            log_event(
                LOGGER,
                level=logging.INFO,
                event="agent_call_completed",
                agent="orchestrator",
                method="get_outfit_suggestions",
                source=source,
                outfits=len(ranked),
                correlation_id=correlation_id,
            )
            return SuggestionResponse(ranked, source, weather, debug_summary)


__all__ = ["OrchestratorAgent", "SuggestionResponse", "SOURCE_NONE"]
