"""Search service: combines candidate sources and builds paginated search responses.

This is the entry point the presentation layer calls. It merges the recipes
gathered from the recipe store and the source adapters, ranks them, and
returns one page of results together with grouping, statistics and
"did you mean" suggestions.
"""

from typing import Any, Dict, List, Optional, Sequence

from recipe_finder.models.models import Recipe, SearchInfo, SearchResponse
from recipe_finder.search.policy import ScoringPolicy, resolve_policy
from recipe_finder.search.scoring import (
    ensure_recipes,
    fuzzy_search_recipes,
    get_search_stats,
    get_suggestions,
    group_recipes_by_match_quality,
)
from recipe_finder.utils.config import config
from recipe_finder.utils.logger import logger


def merge_sources(*sources: Sequence[Any]) -> List[Recipe]:
    """Concatenate candidate lists in priority order, keeping the first recipe per id.

    Args:
        *sources: Candidate lists, highest priority first.

    Returns:
        Merged list of Recipe objects without duplicate ids.

    Raises:
        TypeError: If a source is not a sequence of recipes.
        pydantic.ValidationError: If a source contains a malformed recipe mapping.
    """
    merged: Dict[str, Recipe] = {}
    for source in sources:
        for recipe in ensure_recipes(source):
            if recipe.id in merged:
                logger.debug(f"Skipping duplicate recipe id {recipe.id!r} from source {recipe.source!r}")
                continue
            merged[recipe.id] = recipe
    return list(merged.values())


def search_recipes(
    recipes: Sequence[Any],
    query: str,
    page: int = 1,
    limit: Optional[int] = None,
    min_score: Optional[int] = None,
    policy: Optional[ScoringPolicy] = None,
) -> SearchResponse:
    """Rank candidates against a query and return one page of results.

    An empty query returns the candidates unranked ("browse all") with no
    search_info. When a non-empty query matches nothing, suggestions are
    drawn from the titles of all candidates.

    ``groups`` partitions the returned page only, while ``stats`` and
    ``total`` cover the whole ranked list. A page past the end is therefore
    empty with ``groups.has_results`` False even when ``total`` > 0.

    Args:
        recipes: Candidate recipes (Recipe instances or mappings).
        query: Raw user query.
        page: 1-based page number.
        limit: Page size. Defaults to PAGE_SIZE from configuration.
        min_score: Minimum score to rank. Defaults to the policy's min_score.
        policy: Weights and thresholds. Defaults to the configured policy.

    Returns:
        SearchResponse for the requested page.

    Raises:
        ValueError: If page or limit is below 1.
        TypeError: If query is not a string or recipes is not a sequence.
    """
    limit = config.PAGE_SIZE if limit is None else limit
    if page < 1:
        raise ValueError(f"page must be at least 1, got: {page}")
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got: {limit}")

    policy = resolve_policy(policy)
    candidates = ensure_recipes(recipes)
    ranked = fuzzy_search_recipes(candidates, query, min_score=min_score, policy=policy)

    start = (page - 1) * limit
    page_items = ranked[start : start + limit]
    stats = get_search_stats(ranked)

    search_info = None
    suggestions: List[str] = []
    if query.strip():
        search_info = SearchInfo(
            query=query,
            has_exact_match=stats.has_exact_match,
            avg_match_score=stats.avg_score,
        )
        if not ranked:
            suggestions = get_suggestions(query, [recipe.title for recipe in candidates], policy=policy)

    logger.info(
        f"Search: {len(ranked)} ranked of {len(candidates)} candidates, "
        f"page {page} ({len(page_items)} items), {len(suggestions)} suggestions",
        extra={"query": query},
    )

    return SearchResponse(
        recipes=page_items,
        total=len(ranked),
        page=page,
        limit=limit,
        has_more=start + limit < len(ranked),
        groups=group_recipes_by_match_quality(page_items),
        stats=stats,
        search_info=search_info,
        suggestions=suggestions,
    )
