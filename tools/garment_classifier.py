"""Garment classifier collaborator backed by Gemini vision."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from logic.response_parsing import GarmentDescriptor, parse_garment_descriptor
from logic.safety import system_instruction
from models.taxonomy import CATEGORIES
from tools.gemini_client import GeminiClient
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)

CLASSIFIER_PROMPT = f"""{system_instruction("garment classifier")}

Analyze this clothing item image and provide a detailed fashion analysis in JSON format:
{{
  "category": "one of: {', '.join(CATEGORIES)}",
  "subcategory": "specific type (e.g. t-shirt, jeans, sneakers, blazer)",
  "style": "style category (casual, formal, business, sporty, bohemian, etc.)",
  "colors": ["dominant color first", "secondary colors"],
  "fabric_type": "likely fabric material",
  "pattern": "pattern type (solid, striped, floral, etc.)",
  "formality": "casual, business_casual, or formal",
  "season": "suitable seasons",
  "fit": "fit type (slim, regular, loose, etc.)",
  "warmth_level": 3,
  "weather_suitability": ["cold", "mild", "sun", "rain"],
  "occasion_suitability": ["casual", "business", "formal", "date_night", "sporty"],
  "description": "brief fashion description",
  "styling_tips": "how to style this item"
}}

warmth_level is an integer from 1 (very light) to 5 (very warm).
RETURN ONLY VALID JSON - NO ADDITIONAL TEXT."""


class GarmentClassifier(Protocol):
    async def classify(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> Optional[GarmentDescriptor]:
        ...


class GeminiGarmentClassifier:
    """Label a garment photo; ``None`` on quota, timeout or unparseable replies."""

    def __init__(self, client: GeminiClient) -> None:
        self.client = client

    @instrument_call("classify_garment")
    async def classify(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> Optional[GarmentDescriptor]:
        if not image_bytes:
            return None
        contents = [
            {"inline_data": {"mime_type": mime_type, "data": image_bytes}},
            CLASSIFIER_PROMPT,
        ]
        reply = await self.client.generate(contents, call_name="classifier")
        if not reply.ok:
            return None
        descriptor = parse_garment_descriptor(reply.text)
        if descriptor is None:
            LOGGER.info("Classifier reply could not be parsed")
        return descriptor


__all__ = ["GarmentClassifier", "GeminiGarmentClassifier", "CLASSIFIER_PROMPT"]
