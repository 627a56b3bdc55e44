"""Unit tests for recipe source normalizers."""

import pytest

from recipe_finder.adapters.normalizers import (
    from_collection_meal,
    from_database_row,
    from_mealdb,
    from_spoonacular,
    mealdb_ingredients,
    parse_ingredients,
    preview,
    strip_html,
    youtube_search_link,
)
from recipe_finder.search.scoring import score_recipe


@pytest.fixture
def mealdb_meal():
    """TheMealDB lookup record with sparse numbered ingredient keys."""
    return {
        "idMeal": "52772",
        "strMeal": "Teriyaki Chicken Casserole",
        "strInstructions": "Preheat oven to 350 degrees.",
        "strIngredient1": "soy sauce",
        "strMeasure1": "3/4 cup",
        "strIngredient2": "",
        "strMeasure2": "",
        "strIngredient3": "water",
        "strMeasure3": None,
        "strTags": "Meat, Casserole,",
        "strArea": "Japanese",
        "strMealThumb": "https://www.themealdb.com/images/media/meals/teriyaki.jpg",
        "strYoutube": "",
    }


class TestHelpers:
    """Test text helpers shared by the normalizers."""

    def test_youtube_search_link(self):
        """Test that the link searches for the title plus 'recipe'."""
        assert youtube_search_link("Dal Bhat") == "https://www.youtube.com/results?search_query=Dal%20Bhat%20recipe"

    def test_strip_html(self):
        """Test that tags are removed and text kept."""
        assert strip_html("<b>Sweet</b> and <a href='x'>sour</a>") == "Sweet and sour"
        assert strip_html(None) == ""

    def test_preview_truncates_with_ellipsis(self):
        """Test that previews keep the first characters and add an ellipsis."""
        assert preview("abcdef", fallback="none", limit=3) == "abc…"

    def test_preview_default_length(self):
        """Test that previews default to 150 characters."""
        assert preview("x" * 200, fallback="none") == "x" * 150 + "…"

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_preview_fallback(self, text):
        """Test that missing text yields the fallback instead of a broken preview."""
        assert preview(text, fallback="Description coming soon.") == "Description coming soon."


class TestParseIngredients:
    """Test flattening of stored ingredient shapes."""

    def test_list_of_strings(self):
        """Test that string lists pass through."""
        assert parse_ingredients(["2 cups rice", "1 tsp salt"]) == ["2 cups rice", "1 tsp salt"]

    def test_list_of_objects(self):
        """Test that amount and name keys are joined, with alternative key names."""
        raw = [
            {"amount": "2 cups", "name": "rice"},
            {"quantity": 1, "ingredient": "egg"},
            {"qty": "1 tbsp", "ingredientName": "ghee"},
            {"name": "salt"},
        ]

        assert parse_ingredients(raw) == ["2 cups rice", "1 egg", "1 tbsp ghee", "salt"]

    def test_mapping(self):
        """Test that mappings yield their truthy values."""
        assert parse_ingredients({"a": "lentils", "b": "", "c": "turmeric"}) == ["lentils", "turmeric"]

    @pytest.mark.parametrize("raw", [None, [], "", 42])
    def test_unsupported_or_empty(self, raw):
        """Test that missing or unknown shapes yield no ingredients."""
        assert parse_ingredients(raw) == []


class TestFromDatabaseRow:
    """Test normalization of community database rows."""

    def test_full_row(self):
        """Test that a row maps onto the recipe shape with the community label."""
        recipe = from_database_row(
            {
                "id": 5,
                "title": "Aloo Tama",
                "description": "Bamboo shoot curry",
                "ingredients": [{"amount": "200g", "name": "bamboo shoots"}],
                "tags": ["Nepali"],
                "cuisine": "Nepali",
                "difficulty_level": "Hard",
                "image_url": "https://example.com/aloo.jpg",
                "servings": 4,
                "video_url": "https://www.youtube.com/watch?v=tama",
                "likes": 3,
            }
        )

        assert recipe.id == "db-5"
        assert recipe.source == "Community"
        assert recipe.ingredients == ("200g bamboo shoots",)
        assert recipe.tags == ("Nepali",)
        assert recipe.difficulty_level == "Hard"
        assert recipe.image == "https://example.com/aloo.jpg"
        assert recipe.youtube_link == "https://www.youtube.com/watch?v=tama"
        assert recipe.likes == 3

    def test_sparse_row_defaults(self):
        """Test defaults for a row with only id and title."""
        recipe = from_database_row({"id": 6, "title": "Sel Roti"})

        assert recipe.description == "No description available."
        assert recipe.difficulty_level == "Medium"
        assert recipe.ingredients == ()
        assert recipe.youtube_link == youtube_search_link("Sel Roti")

    def test_missing_title_raises(self):
        """Test that rows without a title are rejected."""
        with pytest.raises(ValueError, match="Database record is missing a title"):
            from_database_row({"id": 7, "title": "  "})


class TestFromSpoonacular:
    """Test normalization of Spoonacular records."""

    def test_full_record(self):
        """Test ids, HTML-free description, ingredient lines, cuisine and tags."""
        recipe = from_spoonacular(
            {
                "id": 11,
                "title": "Pad Thai",
                "summary": "<b>Sweet</b> and sour noodles",
                "extendedIngredients": [
                    {"amount": 2.0, "unit": "cups", "name": "rice noodles"},
                    {"amount": 0.5, "unit": "", "name": "lime"},
                ],
                "cuisines": ["Thai", "Asian"],
                "dishTypes": ["main course"],
                "diets": ["gluten free"],
                "image": "https://example.com/padthai.jpg",
                "servings": 2,
            }
        )

        assert recipe.id == "s-11"
        assert recipe.source == "Spoonacular"
        assert recipe.description == "Sweet and sour noodles…"
        assert recipe.ingredients == ("2 cups rice noodles", "0.5 lime")
        assert recipe.cuisine == "Thai"
        assert recipe.tags == ("main course", "gluten free")
        assert recipe.servings == 2

    def test_description_falls_back_to_instructions(self):
        """Test that instructions are previewed when there is no summary."""
        recipe = from_spoonacular({"id": 12, "title": "Toast", "instructions": "<p>Toast the bread</p>"})

        assert recipe.description == "Toast the bread…"

    def test_description_placeholder(self):
        """Test the placeholder when neither summary nor instructions exist."""
        recipe = from_spoonacular({"id": 13, "title": "Mystery"})

        assert recipe.description == "Description coming soon."
        assert recipe.cuisine is None
        assert recipe.tags == ()

    def test_missing_title_raises(self):
        """Test that records without a title are rejected."""
        with pytest.raises(ValueError, match="Spoonacular record"):
            from_spoonacular({"id": 14})


class TestFromMealDB:
    """Test normalization of TheMealDB records."""

    def test_ingredients_skip_blank_slots(self, mealdb_meal):
        """Test that empty ingredient slots are skipped and missing measures dropped."""
        assert mealdb_ingredients(mealdb_meal) == ["3/4 cup soy sauce", "water"]

    def test_ingredients_capped_at_twenty(self):
        """Test that only the twenty numbered slots are read."""
        meal = {f"strIngredient{i}": f"item{i}" for i in range(1, 25)}

        assert len(mealdb_ingredients(meal)) == 20

    def test_full_record(self, mealdb_meal):
        """Test ids, tags, cuisine and the video fallback."""
        recipe = from_mealdb(mealdb_meal)

        assert recipe.id == "m-52772"
        assert recipe.source == "MealDB"
        assert recipe.description == "Preheat oven to 350 degrees.…"
        assert recipe.tags == ("Meat", "Casserole")
        assert recipe.cuisine == "Japanese"
        assert recipe.difficulty_level == "Medium"
        assert recipe.youtube_link == youtube_search_link("Teriyaki Chicken Casserole")

    def test_missing_instructions_placeholder(self):
        """Test that a meal without instructions gets the placeholder description."""
        recipe = from_mealdb({"idMeal": "1", "strMeal": "Plain Rice"})

        assert recipe.description == "Description coming soon."

    def test_missing_title_raises(self):
        """Test that meals without strMeal are rejected."""
        with pytest.raises(ValueError, match="strMeal"):
            from_mealdb({"idMeal": "1"})


class TestFromCollectionMeal:
    """Test normalization of the curated regional collection."""

    def test_collection_defaults(self):
        """Test the affinity label, default tag, servings and description."""
        recipe = from_collection_meal({"idMeal": "np-1", "strMeal": "Chicken Momo"})

        assert recipe.id == "np-1"
        assert recipe.source == "Nepali Collection"
        assert recipe.tags == ("Nepali",)
        assert recipe.servings == 4
        assert recipe.description == "Authentic Nepali recipe."

    def test_keeps_own_tags_and_instructions(self, mealdb_meal):
        """Test that existing tags and instructions are kept."""
        recipe = from_collection_meal(mealdb_meal)

        assert recipe.tags == ("Meat", "Casserole")
        assert recipe.description.startswith("Preheat oven")

    def test_collection_recipe_gets_affinity_bonus(self):
        """Test that normalized collection recipes are boosted for regional queries."""
        meal = {"idMeal": "np-2", "strMeal": "Chicken Momo"}
        collection = score_recipe(from_collection_meal(meal), "momo")
        external = score_recipe(from_mealdb(meal), "momo")

        assert collection.match_score - external.match_score == 15
