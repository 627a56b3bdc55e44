"""Data models and schemas for the recipe search engine.

Defines Pydantic models for the normalized recipe shape, the scored view the
ranking pipeline produces, and the aggregates handed to the presentation layer.
All models use Pydantic v2 and are frozen: the pipeline builds new objects
instead of mutating its input, and consumers cannot mutate its output.
Fields accept snake_case or camelCase and dump camelCase with ``by_alias=True``.
"""

from typing import Any, Dict, List, Literal, Optional, Tuple, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


MatchType = Literal["exact", "partial", "fuzzy", "ingredient", "tag"]

MATCH_TYPES: Tuple[str, ...] = ("exact", "partial", "fuzzy", "ingredient", "tag")


class Recipe(BaseModel):
    """Domain model for a normalized recipe.

    Produced by the recipe store or by a source adapter, consumed read-only by
    the ranking pipeline. Only id and title are required. Ingredients are always
    a flat sequence of strings; shape normalization happens in the adapters.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: Annotated[str, Field(min_length=1, description="Opaque identifier, unique within a candidate set")]
    title: Annotated[str, Field(min_length=1, description="Recipe name, the primary match signal")]
    description: Annotated[str, Field(description="Free-text description, secondary match signal")] = ""
    ingredients: Annotated[
        Tuple[str, ...], Field(default_factory=tuple, description="Ingredient lines, e.g. '2 cups rice'")
    ]
    tags: Annotated[Optional[Tuple[str, ...]], Field(description="Free-text labels")] = None
    cuisine: Annotated[Optional[str], Field(description="Cuisine label")] = None
    difficulty_level: Annotated[Optional[str], Field(description="Difficulty label (Easy/Medium/Hard)")] = None
    source: Annotated[str, Field(description="Provenance label, e.g. 'Community' or 'MealDB'")] = ""

    # Display fields, carried through the pipeline untouched
    image: Annotated[Optional[str], Field(description="Image URL")] = None
    prep_time_minutes: Annotated[Optional[int], Field(ge=0)] = None
    cook_time_minutes: Annotated[Optional[int], Field(ge=0)] = None
    servings: Annotated[Optional[int], Field(ge=0)] = None
    youtube_link: Optional[str] = None
    likes: Annotated[Optional[int], Field(ge=0)] = None
    views: Annotated[Optional[int], Field(ge=0)] = None
    rating: Annotated[Optional[float], Field(ge=0.0)] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        """Accept numeric identifiers from stores that key by integer."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("description", "source", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        """Treat missing description/source as empty text."""
        return "" if value is None else value

    @field_validator("ingredients", mode="before")
    @classmethod
    def none_to_empty_tuple(cls, value: Any) -> Any:
        return () if value is None else value


class ScoredRecipe(Recipe):
    """A Recipe plus the outcome of ranking it against one query.

    Transient: created fresh per search call, never persisted.
    """

    match_score: Annotated[int, Field(ge=0, description="Additive relevance score (no upper bound)")] = 0
    matched_keywords: Annotated[
        Tuple[str, ...],
        Field(default_factory=tuple, description="Matched tokens and 'token~word' fuzzy traces, de-duplicated"),
    ]
    match_type: Annotated[MatchType, Field(description="Coarse classification of the strongest signal")] = "fuzzy"


class MatchGroups(BaseModel):
    """Partition of a scored list by match quality.

    Every scored recipe lands in exactly one bucket; buckets keep input order.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    exact_matches: List[ScoredRecipe] = Field(default_factory=list)
    partial_matches: List[ScoredRecipe] = Field(default_factory=list)
    ingredient_matches: List[ScoredRecipe] = Field(default_factory=list)
    similar_recipes: List[ScoredRecipe] = Field(default_factory=list)
    has_results: bool = False


class SearchStats(BaseModel):
    """Summary statistics over a scored list."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_recipes: Annotated[int, Field(ge=0)]
    avg_score: Annotated[int, Field(ge=0, description="Mean match score rounded half up, 0 for an empty list")]
    match_types: Annotated[Dict[str, int], Field(default_factory=dict, description="Count per match type")]
    has_exact_match: bool = False
    has_partial_match: bool = False


class SearchInfo(BaseModel):
    """Headline facts about a non-empty query, shown above the results."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    query: str
    has_exact_match: bool
    avg_match_score: Annotated[int, Field(ge=0)]


class SearchResponse(BaseModel):
    """Response schema for one page of search results.

    Contains the page of ranked recipes, pagination metadata, the quality
    grouping of that page, statistics over the whole ranked list, and
    "did you mean" suggestions when nothing matched.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    recipes: List[ScoredRecipe] = Field(default_factory=list)
    total: Annotated[int, Field(ge=0, description="Number of ranked recipes across all pages")]
    page: Annotated[int, Field(ge=1)]
    limit: Annotated[int, Field(ge=1)]
    has_more: bool
    groups: MatchGroups
    stats: SearchStats
    search_info: Optional[SearchInfo] = None
    suggestions: List[str] = Field(default_factory=list)
