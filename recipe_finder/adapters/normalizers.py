"""Normalization of external recipe records into the common Recipe shape.

Each recipe source returns its own record layout: the community database
stores ingredients as strings, objects or mappings; Spoonacular nests
amount/unit/name objects and ships HTML summaries; TheMealDB spreads
ingredients over numbered strIngredientN/strMeasureN keys. The functions here
turn already-fetched records into Recipe objects so the ranker never sees a
source-specific shape. No network I/O happens here.
"""

import re
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from recipe_finder.models.models import Recipe
from recipe_finder.utils.config import config
from recipe_finder.utils.logger import logger

_HTML_TAG_RE = re.compile(r"<[^>]+>")

MEALDB_MAX_INGREDIENTS = 20
DEFAULT_DIFFICULTY = "Medium"

_AMOUNT_KEYS = ("amount", "quantity", "qty")
_NAME_KEYS = ("name", "ingredient", "ingredientName", "item")


def youtube_search_link(title: str) -> str:
    """Build a YouTube search link for recipes without their own video."""
    return f"https://www.youtube.com/results?search_query={quote(f'{title} recipe')}"


def strip_html(text: Optional[str]) -> str:
    """Remove HTML tags from a text fragment."""
    if not text:
        return ""
    return _HTML_TAG_RE.sub("", text)


def preview(text: Optional[str], fallback: str, limit: Optional[int] = None) -> str:
    """Return the first ``limit`` characters of text followed by an ellipsis.

    Args:
        text: Source text, possibly missing.
        fallback: Returned when text is missing or blank.
        limit: Preview length. Defaults to DESCRIPTION_PREVIEW_CHARS.
    """
    if not text or not text.strip():
        return fallback
    limit = config.DESCRIPTION_PREVIEW_CHARS if limit is None else limit
    return text[:limit] + "…"


def _first_present(obj: Mapping[str, Any], keys) -> Any:
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return ""


def parse_ingredients(raw: Any) -> List[str]:
    """Flatten any stored ingredient shape into a list of ingredient lines.

    Handles:
    - list of strings: returned as is
    - list of objects: "<amount> <name>" from amount/quantity/qty and
      name/ingredient/ingredientName/item
    - mapping: its truthy values, as strings
    Anything else yields an empty list.
    """
    if not raw:
        return []

    if isinstance(raw, (list, tuple)):
        if isinstance(raw[0], str):
            return [str(item) for item in raw]

        lines = []
        for item in raw:
            if isinstance(item, Mapping):
                amount = _first_present(item, _AMOUNT_KEYS)
                name = _first_present(item, _NAME_KEYS)
                lines.append(f"{amount} {name}".strip())
            else:
                lines.append(str(item))
        return lines

    if isinstance(raw, Mapping):
        return [str(value) for value in raw.values() if value]

    logger.debug(f"Unsupported ingredient shape: {type(raw).__name__}")
    return []


def _require_title(record: Mapping[str, Any], key: str, source: str) -> str:
    title = record.get(key)
    if not title or not str(title).strip():
        raise ValueError(f"{source} record is missing a title (field '{key}')")
    return str(title)


def _split_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def from_database_row(row: Mapping[str, Any]) -> Recipe:
    """Normalize a community-submitted recipe row.

    Args:
        row: Row from the recipes table.

    Returns:
        Recipe with id "db-<id>" and the configured community source label.

    Raises:
        ValueError: If the row has no title.
    """
    title = _require_title(row, "title", "Database")
    return Recipe(
        id=f"db-{row.get('id')}",
        title=title,
        description=row.get("description") or "No description available.",
        ingredients=parse_ingredients(row.get("ingredients")),
        tags=row.get("tags") or [],
        cuisine=row.get("cuisine"),
        difficulty_level=row.get("difficulty_level") or DEFAULT_DIFFICULTY,
        source=config.COMMUNITY_SOURCE,
        image=row.get("image_url"),
        prep_time_minutes=row.get("prep_time_minutes") or 0,
        cook_time_minutes=row.get("cook_time_minutes") or 0,
        servings=row.get("servings") or 0,
        youtube_link=row.get("video_url") or youtube_search_link(title),
        likes=row.get("likes"),
        views=row.get("views"),
        rating=row.get("rating"),
    )


def _spoonacular_ingredient(ingredient: Mapping[str, Any]) -> str:
    amount = ingredient.get("amount")
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    parts = [amount, ingredient.get("unit"), ingredient.get("name")]
    return " ".join(str(part) for part in parts if part not in (None, "")).strip()


def from_spoonacular(record: Mapping[str, Any]) -> Recipe:
    """Normalize a Spoonacular complexSearch / information record.

    Raises:
        ValueError: If the record has no title.
    """
    title = _require_title(record, "title", "Spoonacular")
    summary = strip_html(record.get("summary"))
    description = preview(summary, fallback="") or preview(
        strip_html(record.get("instructions")), fallback="Description coming soon."
    )
    cuisines = record.get("cuisines") or []
    tags = list(record.get("dishTypes") or []) + list(record.get("diets") or [])

    return Recipe(
        id=f"s-{record.get('id')}",
        title=title,
        description=description,
        ingredients=[_spoonacular_ingredient(ing) for ing in record.get("extendedIngredients") or []],
        tags=tags,
        cuisine=cuisines[0] if cuisines else None,
        difficulty_level=record.get("difficulty") or DEFAULT_DIFFICULTY,
        source="Spoonacular",
        image=record.get("image"),
        prep_time_minutes=record.get("preparationMinutes") or 0,
        cook_time_minutes=record.get("cookingMinutes") or 0,
        servings=record.get("servings") or 0,
        youtube_link=youtube_search_link(title),
    )


def mealdb_ingredients(meal: Mapping[str, Any]) -> List[str]:
    """Collect "<measure> <ingredient>" lines from strIngredientN/strMeasureN keys."""
    lines = []
    for index in range(1, MEALDB_MAX_INGREDIENTS + 1):
        ingredient = meal.get(f"strIngredient{index}")
        if not ingredient or not ingredient.strip():
            continue
        measure = (meal.get(f"strMeasure{index}") or "").strip()
        lines.append(f"{measure} {ingredient.strip()}".strip())
    return lines


def from_mealdb(meal: Mapping[str, Any], source: str = "MealDB", id_prefix: str = "m-") -> Recipe:
    """Normalize a TheMealDB record.

    Args:
        meal: Entry from the "meals" array.
        source: Provenance label to stamp on the recipe.
        id_prefix: Prefix added to idMeal to keep ids unique across sources.

    Raises:
        ValueError: If the record has no strMeal.
    """
    title = _require_title(meal, "strMeal", "MealDB")
    return Recipe(
        id=f"{id_prefix}{meal.get('idMeal')}",
        title=title,
        description=preview(meal.get("strInstructions"), fallback="Description coming soon."),
        ingredients=mealdb_ingredients(meal),
        tags=_split_tags(meal.get("strTags")),
        cuisine=meal.get("strArea"),
        difficulty_level=DEFAULT_DIFFICULTY,
        source=source,
        image=meal.get("strMealThumb"),
        prep_time_minutes=0,
        cook_time_minutes=0,
        servings=0,
        youtube_link=meal.get("strYoutube") or youtube_search_link(title),
    )


def from_collection_meal(meal: Mapping[str, Any]) -> Recipe:
    """Normalize a MealDB-shaped record from the curated regional collection.

    The recipe is stamped with the configured affinity source so regional
    queries boost it; recipes without tags are tagged with the collection's
    default label.
    """
    recipe = from_mealdb(meal, source=config.AFFINITY_SOURCE, id_prefix="")
    updates: Dict[str, Any] = {"servings": 4}
    if not recipe.tags:
        updates["tags"] = ("Nepali",)
    if recipe.description == "Description coming soon.":
        updates["description"] = "Authentic Nepali recipe."
    return recipe.model_copy(update=updates)
