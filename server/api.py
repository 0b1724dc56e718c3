"""FastAPI server exposing wardrobe, outfit and profile endpoints."""

from __future__ import annotations

import asyncio
import base64
import binascii
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from logic.validation import ClothingUploadRequest, ProfileUpdateRequest, SaveOutfitRequest, validation_failure
from models.outfit import OutfitCandidate
from tools.wardrobe_store import DuplicateItemNameError, ItemNotFoundError
from wardrobe_app.app import WardrobeStylistApp

DEFAULT_OWNER = "demo"


def create_app(stylist_app: WardrobeStylistApp | None = None) -> FastAPI:
    """Build the FastAPI application around one :class:`WardrobeStylistApp`."""

    wardrobe = stylist_app or WardrobeStylistApp()
    app = FastAPI(title="Wardrobe Stylist", version="0.1.0")
    app.state.wardrobe = wardrobe

    @app.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness check."""

        return {
            "status": "ok",
            "service": "wardrobe-stylist",
            "environment": wardrobe.config.environment or "local",
            "model": wardrobe.config.model,
        }

    @app.get("/api/clothing-items")
    async def list_items(owner_id: str = Query(DEFAULT_OWNER)) -> List[Dict[str, Any]]:
        return [asdict(item) for item in wardrobe.store.list_items(owner_id)]

    @app.post("/api/clothing-items", status_code=201)
    async def upload_item(request: ClothingUploadRequest, owner_id: str = Query(DEFAULT_OWNER)) -> Dict[str, Any]:
        try:
            image_bytes = base64.b64decode(request.image_base64, validate=True)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=400, detail="image_base64 is not valid base64")
        if not image_bytes:
            raise HTTPException(status_code=400, detail="image is empty")
        try:
            item = await wardrobe.wardrobe_ingestion.upload_item(
                owner_id, request.name, image_bytes, request.mime_type
            )
        except DuplicateItemNameError as exc:
            raise HTTPException(
                status_code=409,
                detail={"message": str(exc), "existing_item": asdict(exc.existing)},
            )
        return asdict(item)

    @app.post("/api/clothing-items/{item_id}/classify")
    async def classify_item(item_id: int, owner_id: str = Query(DEFAULT_OWNER)) -> Dict[str, Any]:
        try:
            item = await wardrobe.wardrobe_ingestion.retry_classification(owner_id, item_id)
        except ItemNotFoundError:
            raise HTTPException(status_code=404, detail="Clothing item not found")
        return asdict(item)

    @app.delete("/api/clothing-items/{item_id}")
    async def delete_item(item_id: int, owner_id: str = Query(DEFAULT_OWNER)) -> Dict[str, Any]:
        try:
            wardrobe.wardrobe_ingestion.delete_item(owner_id, item_id)
        except ItemNotFoundError:
            raise HTTPException(status_code=404, detail="Clothing item not found")
        return {"status": "deleted", "id": item_id}

    @app.get("/api/outfits/suggestions")
    async def outfit_suggestions(
        owner_id: str = Query(DEFAULT_OWNER), occasion: Optional[str] = Query(None)
    ) -> Dict[str, Any]:
        response = await wardrobe.orchestrator.get_outfit_suggestions(owner_id, occasion)
        return response.to_dict()

    @app.get("/api/outfits")
    async def list_outfits(owner_id: str = Query(DEFAULT_OWNER)) -> List[Dict[str, Any]]:
        return [asdict(outfit) for outfit in wardrobe.store.list_outfits(owner_id)]

    @app.post("/api/outfits", status_code=201)
    async def save_outfit(request: SaveOutfitRequest, owner_id: str = Query(DEFAULT_OWNER)) -> Dict[str, Any]:
        candidate = OutfitCandidate(
            name=request.name,
            item_ids=request.item_ids,
            occasion=request.occasion,
            confidence=request.confidence,
        )
        try:
            saved = wardrobe.store.save_outfit(owner_id, candidate)
        except ItemNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return asdict(saved)

    @app.delete("/api/outfits/{outfit_id}")
    async def delete_outfit(outfit_id: int, owner_id: str = Query(DEFAULT_OWNER)) -> Dict[str, Any]:
        if not wardrobe.store.delete_outfit(owner_id, outfit_id):
            raise HTTPException(status_code=404, detail="Outfit not found")
        return {"status": "deleted", "id": outfit_id}

    @app.get("/api/profile")
    async def get_profile(owner_id: str = Query(DEFAULT_OWNER)) -> Dict[str, Any]:
        return asdict(wardrobe.profile_service.get_profile(owner_id))

    @app.put("/api/profile")
    async def update_profile(
        payload: Dict[str, Any] = Body(...), owner_id: str = Query(DEFAULT_OWNER)
    ) -> Any:
        try:
            update = ProfileUpdateRequest.model_validate(payload)
        except ValidationError as exc:
            return JSONResponse(status_code=422, content=validation_failure("Invalid profile update", exc))
        profile = wardrobe.profile_service.update_profile(owner_id, update.to_updates())
        return asdict(profile)

    @app.get("/api/weather")
    async def current_weather(
        owner_id: str = Query(DEFAULT_OWNER), location: Optional[str] = Query(None)
    ) -> Optional[Dict[str, Any]]:
        location = location or wardrobe.profile_service.get_profile(owner_id).location or wardrobe.config.default_location
        if not location:
            return None
        snapshot = await asyncio.to_thread(wardrobe.weather_provider.get_current, location)
        return asdict(snapshot) if snapshot else None

    @app.get("/api/shopping-recommendations")
    async def shopping_recommendations(owner_id: str = Query(DEFAULT_OWNER)) -> List[Dict[str, Any]]:
        return [asdict(record) for record in wardrobe.store.list_recommendations(owner_id)]

    return app


_APP: FastAPI | None = None


def get_app() -> FastAPI:
    """Expose a lazily built FastAPI instance for ASGI servers."""

    global _APP
    if _APP is None:
        _APP = create_app()
    return _APP


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
