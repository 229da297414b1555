from recipe_manager.library.search import SortOption, filter_and_sort_recipes, search_key
from recipe_manager.models.recipe import Ingredient, Recipe


def _recipes():
    return [
        Recipe(
            id="old",
            created_at="2024-01-01T10:00:00Z",
            title_english="Pea soup",
            title_swedish="Ärtsoppa",
            ingredients_swedish=[Ingredient(text="500 g gula ärtor", name="gula ärtor")],
            tags=["soup", "pork"],
            rating=4,
        ),
        Recipe(
            id="mid",
            created_at="2024-02-01T10:00:00Z",
            title_english="Pancakes",
            ingredients_english=[Ingredient(text="2 eggs", name="eggs")],
            tags=["breakfast", "vegetarian"],
            rating=5,
        ),
        Recipe(
            id="new",
            created_at="2024-03-01T10:00:00Z",
            title_english="Lentil soup",
            title_romanian="Supă de linte",
            tags=["soup", "vegan", "vegetarian"],
        ),
    ]


def test_search_key_normalizes_case_and_spacing():
    assert search_key("  Gula   ÄRTOR ") == "gula ärtor"
    assert search_key("") == ""


def test_blank_query_returns_everything_newest_first():
    got = filter_and_sort_recipes(_recipes(), search_query="   ")
    assert [r.id for r in got] == ["new", "mid", "old"]


def test_query_matches_titles_and_ingredient_names_in_any_language():
    assert [r.id for r in filter_and_sort_recipes(_recipes(), "ÄRTOR")] == ["old"]
    assert [r.id for r in filter_and_sort_recipes(_recipes(), "linte")] == ["new"]
    assert [r.id for r in filter_and_sort_recipes(_recipes(), "egg")] == ["mid"]
    assert [r.id for r in filter_and_sort_recipes(_recipes(), "soup")] == ["new", "old"]


def test_tags_use_and_semantics():
    got = filter_and_sort_recipes(_recipes(), selected_tags={"soup", "vegetarian"})
    assert [r.id for r in got] == ["new"]


def test_rating_sort_breaks_ties_by_date():
    recipes = _recipes() + [Recipe(id="newest-unrated", created_at="2024-04-01T10:00:00Z")]

    got = filter_and_sort_recipes(recipes, sort_option=SortOption.RATING)

    assert [r.id for r in got] == ["mid", "old", "newest-unrated", "new"]
