"""Relevance scoring and ranking of recipes against a free-text query.

Each recipe is scored by summing independent signals: the full query found
in the title, keywords found in title/description/ingredients/tags, and
typo-tolerant word matches on the title and ingredients, plus provenance and
multi-keyword bonuses. Every signal that fires is recorded as a matched
keyword so a result can explain why it ranked where it did.

All functions here are pure: they never mutate their input and return the
same output for the same input.
"""

from collections import Counter
from collections.abc import Mapping, Sequence
from math import floor
from typing import Any, Dict, Iterable, List, Optional

from recipe_finder.models.models import MatchGroups, MatchType, Recipe, ScoredRecipe, SearchStats
from recipe_finder.search.policy import ScoringPolicy, resolve_policy
from recipe_finder.search.similarity import similarity_ratio
from recipe_finder.search.tokenizer import extract_keywords
from recipe_finder.utils.logger import logger

# Score cutoffs shared by grouping and statistics
EXACT_MATCH_SCORE = 100
PARTIAL_MATCH_SCORE = 50


def _recipe_fields(recipe: Recipe) -> Dict[str, Any]:
    return recipe.model_dump(include=set(Recipe.model_fields))


class _ScoreAccumulator:
    """Collects score, matched keywords and match type for one recipe."""

    def __init__(self) -> None:
        self.score = 0
        self.match_type: MatchType = "fuzzy"
        # dict keeps first-seen order and de-duplicates
        self._keywords: Dict[str, None] = {}

    def add(self, points: int, keyword: str) -> None:
        self.score += points
        self._keywords[keyword] = None

    def promote(self, candidate: MatchType) -> None:
        """Upgrade the match type following exact > partial > ingredient/tag > fuzzy.

        Ingredient and tag only replace the unset default, so whichever of the
        two fires first is kept.
        """
        if candidate == "exact":
            self.match_type = "exact"
        elif candidate == "partial":
            if self.match_type != "exact":
                self.match_type = "partial"
        elif self.match_type == "fuzzy":
            self.match_type = candidate

    @property
    def keywords(self) -> tuple:
        return tuple(self._keywords)

    def build(self, recipe: Recipe) -> ScoredRecipe:
        return ScoredRecipe(
            **_recipe_fields(recipe),
            match_score=self.score,
            matched_keywords=self.keywords,
            match_type=self.match_type,
        )


def _check_query(query: Any) -> str:
    if not isinstance(query, str):
        raise TypeError(f"query must be a string, got {type(query).__name__}")
    return query


def ensure_recipe(candidate: Any) -> Recipe:
    """Return ``candidate`` as a Recipe, validating mappings.

    Raises:
        TypeError: If candidate is neither a Recipe nor a mapping.
        pydantic.ValidationError: If a mapping lacks a title or has bad fields.
    """
    if isinstance(candidate, Recipe):
        return candidate
    if isinstance(candidate, Mapping):
        return Recipe.model_validate(dict(candidate))
    raise TypeError(f"recipe must be a Recipe or a mapping, got {type(candidate).__name__}")


def ensure_recipes(recipes: Any) -> List[Recipe]:
    """Validate a whole candidate list up front.

    Malformed entries fail the call before any recipe is scored.

    Raises:
        TypeError: If recipes is not a sequence, or an entry has the wrong type.
        pydantic.ValidationError: If an entry is a malformed mapping.
    """
    if isinstance(recipes, (str, bytes)) or not isinstance(recipes, Sequence):
        raise TypeError(f"recipes must be a sequence of recipes, got {type(recipes).__name__}")
    return [ensure_recipe(candidate) for candidate in recipes]


def _fuzzy_word_matches(keyword: str, words: Iterable[str], threshold: float, weight: int):
    """Yield (points, trace) for each word whose similarity to keyword exceeds threshold."""
    for word in words:
        similarity = similarity_ratio(keyword, word)
        if similarity > threshold:
            yield floor(similarity * weight), f"{keyword}~{word}"


def score_recipe(recipe: Any, query: str, policy: Optional[ScoringPolicy] = None) -> ScoredRecipe:
    """Score one recipe against a query.

    The full-query test is a plain substring test, so an empty query matches
    every title as exact. Browsing without a query goes through
    ``fuzzy_search_recipes``, which skips scoring for blank queries.

    Args:
        recipe: Recipe (or mapping in the Recipe shape) to score.
        query: Raw user query.
        policy: Weights and thresholds. Defaults to the configured policy.

    Returns:
        New ScoredRecipe with the accumulated score, matched keywords and match type.

    Raises:
        TypeError: If query is not a string or recipe has the wrong type.
        pydantic.ValidationError: If a recipe mapping is malformed.
    """
    query = _check_query(query)
    recipe = ensure_recipe(recipe)
    policy = resolve_policy(policy)

    acc = _ScoreAccumulator()
    query_lower = query.lower()
    title_lower = recipe.title.lower()
    description_lower = recipe.description.lower()
    ingredients_lower = [ingredient.lower() for ingredient in recipe.ingredients]
    tags_lower = [tag.lower() for tag in recipe.tags or ()]
    title_words = title_lower.split()
    ingredient_words = [ingredient.split() for ingredient in ingredients_lower]

    if query_lower in title_lower:
        acc.add(policy.exact_title_weight, query)
        acc.promote("exact")

    for keyword in extract_keywords(query, policy.stop_words):
        if keyword in title_lower:
            acc.add(policy.title_keyword_weight, keyword)
            acc.promote("partial")

        if keyword in description_lower:
            acc.add(policy.description_keyword_weight, keyword)

        if any(keyword in ingredient for ingredient in ingredients_lower):
            acc.add(policy.ingredient_keyword_weight, keyword)
            acc.promote("ingredient")

        if any(keyword in tag for tag in tags_lower):
            acc.add(policy.tag_keyword_weight, keyword)
            acc.promote("tag")

        for points, trace in _fuzzy_word_matches(
            keyword, title_words, policy.fuzzy_title_threshold, policy.fuzzy_title_weight
        ):
            acc.add(points, trace)

        for words in ingredient_words:
            for points, trace in _fuzzy_word_matches(
                keyword, words, policy.fuzzy_ingredient_threshold, policy.fuzzy_ingredient_weight
            ):
                acc.add(points, trace)

    if recipe.source == policy.community_source:
        acc.score += policy.community_bonus

    if recipe.source == policy.affinity_source and any(term in query_lower for term in policy.affinity_terms):
        acc.score += policy.affinity_bonus

    distinct = len(acc.keywords)
    if distinct > 1:
        acc.score += distinct * policy.multi_keyword_weight

    return acc.build(recipe)


def _unscored(recipe: Recipe) -> ScoredRecipe:
    return ScoredRecipe(**_recipe_fields(recipe), match_score=0, matched_keywords=(), match_type="fuzzy")


def fuzzy_search_recipes(
    recipes: Sequence[Any],
    query: str,
    min_score: Optional[int] = None,
    policy: Optional[ScoringPolicy] = None,
) -> List[ScoredRecipe]:
    """Rank recipes against a query, returning close matches even without an exact hit.

    An empty or whitespace-only query means "browse all": every recipe comes
    back unscored in its original order.

    Args:
        recipes: Candidate recipes (Recipe instances or mappings).
        query: Raw user query.
        min_score: Drop recipes scoring below this. Defaults to the policy's min_score.
        policy: Weights and thresholds. Defaults to the configured policy.

    Returns:
        Scored recipes with score >= min_score, highest score first. Ties keep
        input order.

    Raises:
        TypeError: If query is not a string or recipes is not a sequence.
        pydantic.ValidationError: If any recipe mapping is malformed.
    """
    query = _check_query(query)
    candidates = ensure_recipes(recipes)
    policy = resolve_policy(policy)
    threshold = policy.min_score if min_score is None else min_score

    if not query.strip():
        return [_unscored(recipe) for recipe in candidates]

    scored = [score_recipe(recipe, query, policy) for recipe in candidates]
    ranked = [item for item in scored if item.match_score >= threshold]
    # list.sort is stable, ties keep input order
    ranked.sort(key=lambda item: item.match_score, reverse=True)

    logger.debug(
        f"Ranked {len(ranked)}/{len(candidates)} recipes for query={query!r} (min_score={threshold})"
    )
    return ranked


def group_recipes_by_match_quality(scored: Sequence[ScoredRecipe]) -> MatchGroups:
    """Partition scored recipes into exact, partial, ingredient and similar buckets.

    First matching rule wins: score >= 100, then score >= 50, then an
    ingredient match type, otherwise similar.
    """
    exact: List[ScoredRecipe] = []
    partial: List[ScoredRecipe] = []
    ingredient: List[ScoredRecipe] = []
    similar: List[ScoredRecipe] = []

    for item in scored:
        if item.match_score >= EXACT_MATCH_SCORE:
            exact.append(item)
        elif item.match_score >= PARTIAL_MATCH_SCORE:
            partial.append(item)
        elif item.match_type == "ingredient":
            ingredient.append(item)
        else:
            similar.append(item)

    return MatchGroups(
        exact_matches=exact,
        partial_matches=partial,
        ingredient_matches=ingredient,
        similar_recipes=similar,
        has_results=len(scored) > 0,
    )


def get_suggestions(
    query: str,
    known_titles: Sequence[str],
    limit: Optional[int] = None,
    policy: Optional[ScoringPolicy] = None,
) -> List[str]:
    """Return "did you mean" titles close to, but not the same as, the query.

    A title qualifies when its similarity to the query lies strictly inside
    the policy window (0.60, 0.95).

    Args:
        query: Raw user query.
        known_titles: Titles to draw suggestions from.
        limit: Maximum suggestions. Defaults to the policy's max_suggestions.
        policy: Thresholds. Defaults to the configured policy.

    Returns:
        Up to ``limit`` titles, most similar first.
    """
    query = _check_query(query)
    policy = resolve_policy(policy)
    limit = policy.max_suggestions if limit is None else limit
    query_lower = query.lower()

    candidates = []
    for title in known_titles:
        similarity = similarity_ratio(query_lower, title.lower())
        if policy.suggestion_min_similarity < similarity < policy.suggestion_max_similarity:
            candidates.append((similarity, title))

    candidates.sort(key=lambda pair: pair[0], reverse=True)
    return [title for _, title in candidates[:limit]]


def get_search_stats(scored: Sequence[ScoredRecipe]) -> SearchStats:
    """Summarize a scored list: count, rounded mean score, types, and exact/partial presence."""
    total = len(scored)
    # round half up, so 22.5 -> 23
    avg_score = floor(sum(item.match_score for item in scored) / total + 0.5) if total else 0
    match_types = Counter(item.match_type for item in scored)

    return SearchStats(
        total_recipes=total,
        avg_score=avg_score,
        match_types=dict(match_types),
        has_exact_match=any(item.match_score >= EXACT_MATCH_SCORE for item in scored),
        has_partial_match=any(item.match_score >= PARTIAL_MATCH_SCORE for item in scored),
    )
