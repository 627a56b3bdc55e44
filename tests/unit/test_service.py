"""Unit tests for the search service."""

import pytest

from recipe_finder.models.models import Recipe
from recipe_finder.search.service import merge_sources, search_recipes


@pytest.fixture
def lentil_recipes():
    """Five equally scored recipes for pagination."""
    return [Recipe(id=str(i), title=f"Lentil Soup {i}") for i in range(5)]


class TestSearchRecipes:
    """Test paginated search responses."""

    def test_first_page(self, lentil_recipes):
        """Test that the first page holds the top results and reports more."""
        response = search_recipes(lentil_recipes, "lentil", page=1, limit=2)

        assert [r.id for r in response.recipes] == ["0", "1"]
        assert response.total == 5
        assert response.page == 1
        assert response.limit == 2
        assert response.has_more is True

    def test_last_page(self, lentil_recipes):
        """Test that the last page may be short and reports no more."""
        response = search_recipes(lentil_recipes, "lentil", page=3, limit=2)

        assert [r.id for r in response.recipes] == ["4"]
        assert response.has_more is False

    def test_page_past_end(self, lentil_recipes):
        """Test that a page beyond the results is empty."""
        response = search_recipes(lentil_recipes, "lentil", page=9, limit=2)

        assert response.recipes == []
        assert response.total == 5
        assert response.has_more is False
        # groups describe the page, stats the whole ranked list
        assert response.groups.has_results is False
        assert response.stats.total_recipes == 5

    def test_exact_fit_has_no_more(self, lentil_recipes):
        """Test that has_more is false when the page ends exactly at the last result."""
        response = search_recipes(lentil_recipes, "lentil", page=1, limit=5)

        assert response.has_more is False

    def test_default_limit_from_config(self, lentil_recipes):
        """Test that the page size defaults to PAGE_SIZE."""
        assert search_recipes(lentil_recipes, "lentil").limit == 12

    def test_groups_cover_page_and_stats_cover_all(self, lentil_recipes):
        """Test that groups partition the page while stats describe all ranked results."""
        response = search_recipes(lentil_recipes, "lentil", page=1, limit=2)

        grouped = (
            response.groups.exact_matches
            + response.groups.partial_matches
            + response.groups.ingredient_matches
            + response.groups.similar_recipes
        )
        assert len(grouped) == 2
        assert response.stats.total_recipes == 5

    def test_search_info_for_query(self, lentil_recipes):
        """Test that a non-empty query carries search info."""
        response = search_recipes(lentil_recipes, "lentil")

        assert response.search_info.query == "lentil"
        assert response.search_info.has_exact_match is True
        assert response.search_info.avg_match_score == response.stats.avg_score

    def test_browse_all_for_empty_query(self, lentil_recipes):
        """Test that an empty query lists everything unscored without search info."""
        response = search_recipes(lentil_recipes, "")

        assert response.total == 5
        assert all(r.match_score == 0 for r in response.recipes)
        assert response.search_info is None
        assert response.suggestions == []

    def test_suggestions_when_nothing_matches(self):
        """Test that suggestions come from all candidate titles when nothing ranks."""
        recipes = [Recipe(id="1", title="Pasta Salad"), Recipe(id="2", title="Beef Stew")]

        response = search_recipes(recipes, "pastasalad")

        assert response.recipes == []
        assert response.total == 0
        assert response.suggestions == ["Pasta Salad"]
        assert response.search_info.has_exact_match is False

    def test_no_suggestions_when_results_exist(self, lentil_recipes):
        """Test that suggestions are only offered for empty results."""
        assert search_recipes(lentil_recipes, "lentil").suggestions == []

    def test_min_score_passes_through(self, lentil_recipes):
        """Test that an unreachable threshold empties the results."""
        response = search_recipes(lentil_recipes, "lentil", min_score=10_000)

        assert response.total == 0

    def test_accepts_mappings(self):
        """Test that raw records are validated into recipes."""
        response = search_recipes([{"id": 1, "title": "Dal Bhat"}], "dal bhat")

        assert response.recipes[0].id == "1"
        assert response.recipes[0].match_type == "exact"

    @pytest.mark.parametrize("page,limit,message", [(0, 5, "page must be at least 1"), (1, 0, "limit must be at least 1")])
    def test_invalid_pagination(self, lentil_recipes, page, limit, message):
        """Test that pages and limits below 1 are rejected."""
        with pytest.raises(ValueError, match=message):
            search_recipes(lentil_recipes, "lentil", page=page, limit=limit)


class TestMergeSources:
    """Test candidate source merging."""

    def test_first_source_wins_on_duplicate_id(self):
        """Test that the earlier source keeps a duplicated id."""
        community = [Recipe(id="1", title="Dal", source="Community")]
        external = [Recipe(id="1", title="Dal Copy", source="MealDB"), Recipe(id="2", title="Momo")]

        merged = merge_sources(community, external)

        assert [(r.id, r.title) for r in merged] == [("1", "Dal"), ("2", "Momo")]

    def test_keeps_source_order(self):
        """Test that recipes keep priority order across sources."""
        merged = merge_sources([{"id": "a", "title": "A"}], [{"id": "b", "title": "B"}], [])

        assert [r.id for r in merged] == ["a", "b"]

    def test_no_sources(self):
        """Test that merging nothing yields nothing."""
        assert merge_sources() == []

    def test_rejects_non_sequence_source(self):
        """Test that each source must be a sequence."""
        with pytest.raises(TypeError):
            merge_sources(None)
