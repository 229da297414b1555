"""Locate and leniently parse the JSON recipe embedded in a model answer.

A located JSON document that is syntactically valid never fails here: each
field is read on its own and a missing or wrong-typed value degrades to its
default. Only an undecodable document raises ExtractionFailed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import jsonschema

from recipe_manager.errors import ExtractionFailed
from recipe_manager.models.recipe import Ingredient, Language
from recipe_manager.settings import RECIPE_RESPONSE_SCHEMA

logger = logging.getLogger(__name__)


@dataclass
class LocalizedContent:
    title: str = ""
    ingredients: List[Ingredient] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    notes: Optional[str] = None


@dataclass
class IntermediateRecipe:
    content: Dict[Language, LocalizedContent] = field(
        default_factory=lambda: {lang: LocalizedContent() for lang in Language}
    )
    servings: Optional[int] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    detected_language: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class PartialContent:
    """Translated fields for one language; None means absent from the answer."""

    title: Optional[str] = None
    ingredients: Optional[List[Ingredient]] = None
    instructions: Optional[List[str]] = None
    notes: Optional[str] = None


@dataclass
class PartialTranslation:
    content: Dict[Language, PartialContent] = field(default_factory=dict)


def extract_json_object(raw: str) -> str:
    """Return the text from the first '{' to the last '}', or raw unchanged."""
    start = raw.find("{")
    end = raw.rfind("}")
    if start >= 0 and end > start:
        return raw[start : end + 1]
    return raw


def decode_json_object(json_text: str) -> Dict[str, Any]:
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse JSON: %s | snippet: %s", e, json_text[:200])
        raise ExtractionFailed(e) from e
    if not isinstance(data, dict):
        logger.error("Expected a JSON object, got %s", type(data).__name__)
        raise ExtractionFailed(f"expected a JSON object, got {type(data).__name__}")
    return data


def warn_on_schema_mismatch(data: Dict[str, Any], schema: Dict[str, Any] | None = None) -> bool:
    """Log a warning if data does not align with the response schema. Never raises."""
    schema = RECIPE_RESPONSE_SCHEMA if schema is None else schema
    if not schema:
        return True
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        logger.warning("Response does not align with RECIPE_RESPONSE_SCHEMA: %s", e.message)
        return False
    return True


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _string(obj: Dict[str, Any], key: str, default: str = "") -> str:
    text = _as_text(obj.get(key))
    return default if text is None else text


def _optional_string(obj: Dict[str, Any], key: str) -> Optional[str]:
    return _as_text(obj.get(key))


def _optional_int(obj: Dict[str, Any], key: str) -> Optional[int]:
    value = obj.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        try:
            return int(value.strip())
        except ValueError:
            # over the interpreter's int-string digit limit
            return None
    return None


def _string_list(value: Any, key: str = "") -> Optional[List[str]]:
    """Return the list of strings, or None if value is not a list."""
    if not isinstance(value, list):
        if value is not None:
            logger.warning("Field %s is not an array; ignoring", key)
        return None
    items = []
    for item in value:
        text = _as_text(item)
        if text is not None:
            items.append(text)
    return items


def _ingredient_list(value: Any, key: str = "") -> Optional[List[Ingredient]]:
    if not isinstance(value, list):
        if value is not None:
            logger.warning("Field %s is not an array; ignoring", key)
        return None
    ingredients = []
    for item in value:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object ingredient in %s: %r", key, item)
            continue
        # ids are always generated here, never taken from the payload
        ingredients.append(
            Ingredient(
                text=_string(item, "text"),
                amount=_optional_string(item, "amount"),
                unit=_optional_string(item, "unit"),
                name=_string(item, "name"),
            )
        )
    return ingredients


def intermediate_from_dict(data: Dict[str, Any]) -> IntermediateRecipe:
    result = IntermediateRecipe()
    for lang in Language:
        suffix = lang.suffix
        result.content[lang] = LocalizedContent(
            title=_string(data, f"title{suffix}"),
            ingredients=_ingredient_list(data.get(f"ingredients{suffix}"), f"ingredients{suffix}") or [],
            instructions=_string_list(data.get(f"instructions{suffix}"), f"instructions{suffix}") or [],
            notes=_optional_string(data, f"notes{suffix}"),
        )

    servings = _optional_int(data, "servings")
    result.servings = servings if servings is not None and servings > 0 else None
    result.prep_time = _optional_string(data, "prepTime")
    result.cook_time = _optional_string(data, "cookTime")
    result.tags = _string_list(data.get("tags"), "tags") or []
    result.detected_language = _optional_string(data, "detectedLanguage")
    result.notes = _optional_string(data, "notes")
    return result


def parse_intermediate(json_text: str) -> IntermediateRecipe:
    """Decode json_text and read every recipe field with its own fallback."""
    return intermediate_from_dict(decode_json_object(json_text))


def translation_from_dict(data: Dict[str, Any]) -> PartialTranslation:
    translation = PartialTranslation()
    for lang in (Language.SWEDISH, Language.ROMANIAN):
        suffix = lang.suffix
        translation.content[lang] = PartialContent(
            title=_optional_string(data, f"title{suffix}"),
            ingredients=_ingredient_list(data.get(f"ingredients{suffix}"), f"ingredients{suffix}"),
            instructions=_string_list(data.get(f"instructions{suffix}"), f"instructions{suffix}"),
            notes=_optional_string(data, f"notes{suffix}"),
        )
    return translation


def parse_translation(json_text: str) -> PartialTranslation:
    return translation_from_dict(decode_json_object(json_text))
