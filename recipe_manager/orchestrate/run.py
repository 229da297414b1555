"""Orchestrator: build the prompt per input kind, call the model, parse, normalize.

Every public operation returns a Success(Recipe) or Failure(error); nothing
raised inside the pipeline escapes these functions. The *_async operations
run on httpx, so cancelling the awaiting task aborts the request in flight
and delivers no result.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Union

import httpx
import requests

from recipe_manager.errors import ExtractionFailed, RecipeError
from recipe_manager.ingest.extract_json import (
    decode_json_object,
    extract_json_object,
    intermediate_from_dict,
    translation_from_dict,
    warn_on_schema_mismatch,
)
from recipe_manager.ingest.fetch import fetch_html, fetch_html_async
from recipe_manager.ingest.llm_client import AsyncClaudeClient, ClaudeClient, ImagePart, TextPart
from recipe_manager.models.recipe import Recipe
from recipe_manager.normalize.normalizer import apply_translation, to_recipe
from recipe_manager.orchestrate.prompts import (
    EXTRACTION_PROMPT,
    text_prompt,
    translation_prompt,
    url_prompt,
)
from recipe_manager.result import Failure, Result, Success

logger = logging.getLogger(__name__)

Part = Union[TextPart, ImagePart]


def _succeeded(operation: str, recipe: Recipe) -> Result[Recipe]:
    logger.info(
        "%s success | title=%s ingredients=%d instructions=%d",
        operation,
        recipe.title_english,
        len(recipe.ingredients_english),
        len(recipe.instructions_english),
    )
    return Success(recipe)


def _failed(operation: str, error: Exception) -> Result[Recipe]:
    if isinstance(error, RecipeError):
        logger.error("%s failed: %s", operation, error)
        return Failure(error)
    logger.error("%s failed unexpectedly", operation, exc_info=error)
    return Failure(ExtractionFailed(error))


def _guarded(operation: str, fn: Callable[[], Recipe]) -> Result[Recipe]:
    try:
        recipe = fn()
    except Exception as e:
        return _failed(operation, e)
    return _succeeded(operation, recipe)


async def _guarded_async(operation: str, fn: Callable[[], Awaitable[Recipe]]) -> Result[Recipe]:
    # CancelledError is not an Exception and propagates to the caller
    try:
        recipe = await fn()
    except Exception as e:
        return _failed(operation, e)
    return _succeeded(operation, recipe)


def recipe_from_answer(answer: str) -> Recipe:
    """Turn the model's raw text into a new Recipe. Raises ExtractionFailed."""
    json_text = extract_json_object(answer)
    logger.debug("Extracted JSON length: %d", len(json_text))
    data = decode_json_object(json_text)
    warn_on_schema_mismatch(data)
    return to_recipe(intermediate_from_dict(data))


def translated_from_answer(recipe: Recipe, answer: str) -> Recipe:
    data = decode_json_object(extract_json_object(answer))
    return apply_translation(recipe, translation_from_dict(data))


def _image_parts(image_bytes: bytes, mime_type: str) -> List[Part]:
    return [ImagePart.from_bytes(image_bytes, mime_type), TextPart(text=EXTRACTION_PROMPT)]


def _ask(parts: List[Part], api_key: str, session: requests.Session | None) -> str:
    return ClaudeClient(api_key, session=session).complete(parts).unwrap()


async def _ask_async(parts: List[Part], api_key: str, transport: httpx.AsyncBaseTransport | None) -> str:
    # the client is closed on every exit path, cancellation included
    async with httpx.AsyncClient(transport=transport) as http:
        result = await AsyncClaudeClient(api_key, client=http).complete(parts)
    return result.unwrap()


def extract_from_image(
    image_bytes: bytes,
    mime_type: str,
    api_key: str,
    session: requests.Session | None = None,
) -> Result[Recipe]:
    logger.info("extract_from_image start | bytes=%d mime_type=%s", len(image_bytes), mime_type)
    return _guarded(
        "extract_from_image",
        lambda: recipe_from_answer(_ask(_image_parts(image_bytes, mime_type), api_key, session)),
    )


def extract_from_text(
    text: str,
    api_key: str,
    session: requests.Session | None = None,
) -> Result[Recipe]:
    logger.info("extract_from_text start | chars=%d", len(text))
    logger.debug("Text preview: %s", text[:200])
    return _guarded(
        "extract_from_text",
        lambda: recipe_from_answer(_ask([TextPart(text=text_prompt(text))], api_key, session)),
    )


def extract_from_url(
    url: str,
    html_content: str,
    api_key: str,
    session: requests.Session | None = None,
) -> Result[Recipe]:
    """Extract from page content already retrieved by the fetcher."""
    logger.info("extract_from_url start | url=%s chars=%d", url, len(html_content))
    logger.debug("HTML preview: %s", html_content[:500])
    return _guarded(
        "extract_from_url",
        lambda: recipe_from_answer(_ask([TextPart(text=url_prompt(url, html_content))], api_key, session)),
    )


def translate_recipe(
    recipe: Recipe,
    api_key: str,
    session: requests.Session | None = None,
) -> Result[Recipe]:
    """Re-translate the Swedish and Romanian content of an existing recipe."""
    logger.info("translate_recipe start | id=%s title=%s", recipe.id, recipe.title_english)
    parts: List[Part] = [TextPart(text=translation_prompt(recipe.to_json()))]
    return _guarded(
        "translate_recipe",
        lambda: translated_from_answer(recipe, _ask(parts, api_key, session)),
    )


def url_to_recipe(
    url: str,
    api_key: str,
    fetch_session: requests.Session | None = None,
    session: requests.Session | None = None,
) -> Result[Recipe]:
    """Fetch a URL and extract a recipe from the page."""
    try:
        html = fetch_html(url, session=fetch_session)
    except RecipeError as e:
        logger.error("Ingest failed | url=%s stage=fetch error=%s", url, e)
        return Failure(e)
    return extract_from_url(url, html, api_key, session=session)


async def extract_from_image_async(
    image_bytes: bytes,
    mime_type: str,
    api_key: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[Recipe]:
    logger.info("extract_from_image_async start | bytes=%d mime_type=%s", len(image_bytes), mime_type)

    async def run() -> Recipe:
        return recipe_from_answer(await _ask_async(_image_parts(image_bytes, mime_type), api_key, transport))

    return await _guarded_async("extract_from_image_async", run)


async def extract_from_text_async(
    text: str,
    api_key: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[Recipe]:
    logger.info("extract_from_text_async start | chars=%d", len(text))

    async def run() -> Recipe:
        return recipe_from_answer(await _ask_async([TextPart(text=text_prompt(text))], api_key, transport))

    return await _guarded_async("extract_from_text_async", run)


async def extract_from_url_async(
    url: str,
    html_content: str,
    api_key: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[Recipe]:
    logger.info("extract_from_url_async start | url=%s chars=%d", url, len(html_content))

    async def run() -> Recipe:
        parts: List[Part] = [TextPart(text=url_prompt(url, html_content))]
        return recipe_from_answer(await _ask_async(parts, api_key, transport))

    return await _guarded_async("extract_from_url_async", run)


async def translate_recipe_async(
    recipe: Recipe,
    api_key: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[Recipe]:
    logger.info("translate_recipe_async start | id=%s title=%s", recipe.id, recipe.title_english)
    parts: List[Part] = [TextPart(text=translation_prompt(recipe.to_json()))]

    async def run() -> Recipe:
        return translated_from_answer(recipe, await _ask_async(parts, api_key, transport))

    return await _guarded_async("translate_recipe_async", run)


async def url_to_recipe_async(
    url: str,
    api_key: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[Recipe]:
    """Fetch a URL and extract a recipe from the page over one httpx client."""
    async with httpx.AsyncClient(transport=transport) as http:
        try:
            html = await fetch_html_async(url, http)
        except RecipeError as e:
            logger.error("Ingest failed | url=%s stage=fetch error=%s", url, e)
            return Failure(e)
        logger.info("url_to_recipe_async fetched | url=%s chars=%d", url, len(html))

        async def run() -> Recipe:
            parts: List[Part] = [TextPart(text=url_prompt(url, html))]
            result = await AsyncClaudeClient(api_key, client=http).complete(parts)
            return recipe_from_answer(result.unwrap())

        return await _guarded_async("url_to_recipe_async", run)
