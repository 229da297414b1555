"""Search, tag filtering and sorting over an in-memory list of recipes."""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable, List

from recipe_manager.models.recipe import Language, Recipe

logger = logging.getLogger(__name__)


class SortOption(Enum):
    DATE_ADDED = "date_added"
    RATING = "rating"


def search_key(text: str) -> str:
    """Lowercase and collapse whitespace so queries match loosely typed names."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text.lower()).strip()


def matches_query(recipe: Recipe, query: str) -> bool:
    q = search_key(query)
    if not q:
        return True
    for lang in Language:
        if q in search_key(recipe.title_for(lang)):
            return True
        if any(q in search_key(ing.name) for ing in recipe.ingredients_for(lang)):
            return True
    return False


def filter_and_sort_recipes(
    recipes: Iterable[Recipe],
    search_query: str = "",
    selected_tags: Iterable[str] = (),
    sort_option: SortOption = SortOption.DATE_ADDED,
) -> List[Recipe]:
    filtered = [r for r in recipes if matches_query(r, search_query)]

    # AND semantics: a recipe must carry every selected tag
    tags = set(selected_tags)
    if tags:
        filtered = [r for r in filtered if tags.issubset(r.tags)]

    if sort_option is SortOption.RATING:
        filtered.sort(key=lambda r: (r.rating or 0, r.created_at), reverse=True)
    else:
        filtered.sort(key=lambda r: r.created_at, reverse=True)

    logger.debug(
        "filter_and_sort_recipes | query=%r tags=%s sort=%s -> %d",
        search_query,
        sorted(tags),
        sort_option.value,
        len(filtered),
    )
    return filtered
