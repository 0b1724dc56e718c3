"""Application bootstrap: wires stores, collaborators and agents together."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from agents.orchestrator import OrchestratorAgent
from agents.outfit_stylist_agent import OutfitStylistAgent
from agents.wardrobe_ingestion import WardrobeIngestionAgent
from logic.duplicate_suppression import DuplicateSuppressor
from logic.shopping_gaps import ShoppingGapAnalyzer
from memory.suggestion_history import SuggestionHistoryRegistry
from memory.user_profile import UserProfileService
from tools.garment_classifier import GarmentClassifier, GeminiGarmentClassifier
from tools.gemini_client import GeminiClient
from tools.gemini_stylist import GeminiStylist, OutfitStylist
from tools.rate_limit import SlidingWindowRateLimiter
from tools.wardrobe_store import SQLiteWardrobeStore
from tools.weather_provider import CachedWeatherProvider, OpenWeatherProvider, WeatherProvider
from wardrobe_app.config import AppConfig
from wardrobe_app.logging_config import configure_logging, get_logger, log_event

LOGGER = get_logger(__name__)


class WardrobeStylistApp:
    """Owns every long-lived component for one process.

    Collaborators (stylist, classifier, weather source) can be injected; by
    default they are the Gemini and OpenWeather implementations configured
    from :class:`AppConfig`.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        stylist: Optional[OutfitStylist] = None,
        classifier: Optional[GarmentClassifier] = None,
        weather_source: Optional[WeatherProvider] = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging()

        self.store = SQLiteWardrobeStore(self.config.wardrobe_db_path)
        self.profile_service = UserProfileService(self.config.profile_dir)
        self.history_registry = SuggestionHistoryRegistry()

        self.rate_limiter = SlidingWindowRateLimiter(requests_per_window=self.config.ai_requests_per_minute)
        self.gemini_client = GeminiClient(
            api_key=self.config.api_key,
            model_name=self.config.model,
            rate_limiter=self.rate_limiter,
            timeout_seconds=self.config.stylist_timeout_seconds,
        )
        self.stylist = stylist or GeminiStylist(self.gemini_client)
        self.classifier = classifier or GeminiGarmentClassifier(self.gemini_client)

        self.weather_provider = CachedWeatherProvider(
            weather_source or OpenWeatherProvider(api_key=self.config.weather_api_key),
            self.store,
            max_age=timedelta(minutes=self.config.weather_cache_minutes),
        )

        self.outfit_stylist = OutfitStylistAgent(
            stylist=self.stylist,
            suppressor=DuplicateSuppressor(),
            validation_policy=self.config.ai_validation_policy,
            fallback_max_outfits=self.config.fallback_max_outfits,
        )
        self.orchestrator = OrchestratorAgent(
            store=self.store,
            profile_service=self.profile_service,
            stylist_agent=self.outfit_stylist,
            history_registry=self.history_registry,
            weather_provider=self.weather_provider,
            gap_analyzer=ShoppingGapAnalyzer(self.store),
            suggestion_limit=self.config.suggestion_limit,
            default_location=self.config.default_location,
        )
        self.wardrobe_ingestion = WardrobeIngestionAgent(
            store=self.store,
            classifier=self.classifier,
            upload_dir=self.config.upload_dir,
        )

        log_event(
            LOGGER,
            level=logging.INFO,
            event="app_initialized",
            environment=self.config.environment or "local",
            model=self.config.model,
            stylist_configured=bool(self.config.api_key) or stylist is not None,
            validation_policy=self.config.ai_validation_policy,
        )


__all__ = ["WardrobeStylistApp"]
