"""Tests for tolerant decoding of stylist and classifier replies."""

from __future__ import annotations

from logic.response_parsing import (
    extract_json_block,
    parse_garment_descriptor,
    parse_stylist_response,
)


def test_fenced_reply_with_camel_case_keys() -> None:
    reply = """Here you go!
```json
{"outfits": [{"name": "City Walk", "itemIds": ["3", 1, 2], "confidence": "88%",
  "stylingTips": "Roll the sleeves", "weatherNote": "Fine for a breeze"}]}
```
Enjoy."""

    (outfit,) = parse_stylist_response(reply)

    assert outfit.name == "City Walk"
    assert outfit.item_ids == [3, 1, 2]
    assert outfit.confidence == 88
    assert outfit.styling_tips == "Roll the sleeves"
    assert outfit.weather_note == "Fine for a breeze"


def test_prose_wrapped_bare_list_with_snake_case_keys() -> None:
    reply = 'Sure. [{"name": "Office", "item_ids": [4, 5], "styling_tips": ["Tuck", "Belt"]}] Hope it helps.'

    (outfit,) = parse_stylist_response(reply)

    assert outfit.item_ids == [4, 5]
    assert outfit.confidence == 80
    assert outfit.styling_tips == "Tuck Belt"


def test_invalid_entries_are_skipped() -> None:
    reply = """{"suggestions": [
        {"name": "No items", "item_ids": []},
        "not an object",
        {"name": "Good", "items": [{"id": 7}, {"id": 8}], "confidence": 250}
    ]}"""

    outfits = parse_stylist_response(reply)

    assert [outfit.name for outfit in outfits] == ["Good"]
    assert outfits[0].item_ids == [7, 8]
    assert outfits[0].confidence == 100


def test_single_outfit_object_is_accepted() -> None:
    outfits = parse_stylist_response('{"name": "Solo", "ids": "1, 2"}')

    assert [outfit.item_ids for outfit in outfits] == [[1, 2]]


def test_reply_without_json_returns_none() -> None:
    assert parse_stylist_response("I'm sorry, I can't help with that.") is None
    assert parse_stylist_response("") is None
    assert parse_stylist_response(None) is None


def test_extract_skips_broken_braces_before_payload() -> None:
    assert extract_json_block('use {curly} braces: {"ok": true}') == {"ok": True}


def test_descriptor_coerces_unknown_category_and_clamps_warmth() -> None:
    reply = """```json
{"category": "Jumpsuit", "colors": ["Navy Blue", "gray"], "warmthLevel": 9,
 "weatherSuitability": "Cold, Rainy", "fabric": "wool", "season": "winter"}
```"""

    descriptor = parse_garment_descriptor(reply)

    assert descriptor.category == "other"
    assert descriptor.colors == ["navy", "grey"]
    assert descriptor.warmth_level == 5
    assert descriptor.weather_suitability == ["cold", "rainy"]
    assert descriptor.fabric_type == "wool"
    fields = descriptor.to_item_fields()
    assert fields["is_verified"] is True
    assert "season" not in fields


def test_descriptor_keeps_known_category() -> None:
    descriptor = parse_garment_descriptor('[{"category": "Tops", "subcategory": "t-shirt"}]')

    assert descriptor.category == "tops"
    assert descriptor.subcategory == "t-shirt"


def test_descriptor_without_json_is_none() -> None:
    assert parse_garment_descriptor("a blue shirt") is None
