"""Map parsed model output onto Recipe records."""

from __future__ import annotations

import logging

from recipe_manager.ingest.extract_json import IntermediateRecipe, PartialTranslation
from recipe_manager.models.recipe import Language, Recipe, new_id

logger = logging.getLogger(__name__)


def _field(prefix: str, lang: Language) -> str:
    return f"{prefix}_{lang.name.lower()}"


def to_recipe(intermediate: IntermediateRecipe) -> Recipe:
    """Build a fresh Recipe with a new id.

    Per-language arrays are copied as they are; unequal lengths across
    languages are kept, consumers must cope with them.
    """
    fields = {}
    for lang, content in intermediate.content.items():
        fields[_field("title", lang)] = content.title
        fields[_field("ingredients", lang)] = list(content.ingredients)
        fields[_field("instructions", lang)] = list(content.instructions)
        fields[_field("notes", lang)] = content.notes

    lengths = {len(c.ingredients) for c in intermediate.content.values() if c.ingredients}
    if len(lengths) > 1:
        logger.debug("Ingredient counts differ across languages: %s", sorted(lengths))

    recipe = Recipe(
        id=new_id(),
        tags=list(intermediate.tags),
        servings=intermediate.servings,
        prep_time=intermediate.prep_time,
        cook_time=intermediate.cook_time,
        detected_language=intermediate.detected_language,
        notes=intermediate.notes,
        **fields,
    )
    logger.debug(
        "Normalized recipe %s | title=%s ingredients=%d instructions=%d",
        recipe.id,
        recipe.title_english,
        len(recipe.ingredients_english),
        len(recipe.instructions_english),
    )
    return recipe


def apply_translation(base: Recipe, translation: PartialTranslation) -> Recipe:
    """Overwrite only Swedish and Romanian content; absent fields keep base values."""
    update = {}
    for lang in (Language.SWEDISH, Language.ROMANIAN):
        content = translation.content.get(lang)
        if content is None:
            continue
        if content.title is not None:
            update[_field("title", lang)] = content.title
        if content.ingredients is not None:
            update[_field("ingredients", lang)] = list(content.ingredients)
        if content.instructions is not None:
            update[_field("instructions", lang)] = list(content.instructions)
        if content.notes is not None:
            update[_field("notes", lang)] = content.notes
    logger.debug("Applying translation to %s | fields=%s", base.id, sorted(update))
    return base.model_copy(update=update, deep=True)
