import requests

from recipe_manager.errors import ExtractionFailed, HttpError, NoTextInResponse, RequestTimeout
from recipe_manager.models.recipe import Ingredient, Recipe
from recipe_manager.orchestrate import run
from recipe_manager.orchestrate.prompts import EXTRACTION_PROMPT

from fakes import FakeResponse, FakeSession, claude_response, redirect

PANCAKES_ANSWER = (
    'Here you go:\n{"titleEnglish":"Pancakes","ingredientsEnglish":[{"text":"2 eggs",'
    '"amount":"2","unit":null,"name":"eggs"}],"instructionsEnglish":["Mix","Cook"],"servings":4}'
)


def _sent_text(session, index=0):
    return [p for p in session.calls[index]["json"]["messages"][0]["content"] if p["type"] == "text"][0]["text"]


def test_extract_from_text_with_chatty_answer():
    session = FakeSession(claude_response(PANCAKES_ANSWER))

    result = run.extract_from_text("pancake recipe", "sk-test", session=session)

    assert result.ok
    recipe = result.value
    assert recipe.title_english == "Pancakes"
    assert [i.name for i in recipe.ingredients_english] == ["eggs"]
    assert recipe.instructions_english == ["Mix", "Cook"]
    assert recipe.servings == 4
    assert recipe.title_swedish == "" and recipe.title_romanian == ""
    assert recipe.ingredients_swedish == [] and recipe.ingredients_romanian == []
    assert recipe.instructions_swedish == [] and recipe.instructions_romanian == []
    assert _sent_text(session).endswith("Recipe content:\npancake recipe")


def test_answer_without_json_fails_with_extraction_failed():
    session = FakeSession(claude_response("Sorry, I could not find a recipe in that text."))

    result = run.extract_from_text("hello", "sk-test", session=session)

    assert not result.ok
    assert isinstance(result.error, ExtractionFailed)


def test_extract_from_image_sends_image_then_prompt():
    session = FakeSession(claude_response('{"titleEnglish": "Cake"}'))

    result = run.extract_from_image(b"\xff\xd8jpeg", "image/jpeg", "sk-test", session=session)

    assert result.value.title_english == "Cake"
    content = session.calls[0]["json"]["messages"][0]["content"]
    assert [p["type"] for p in content] == ["image", "text"]
    assert content[0]["source"]["media_type"] == "image/jpeg"
    assert content[1]["text"] == EXTRACTION_PROMPT


def test_extract_from_url_includes_source_url():
    session = FakeSession(claude_response('{"titleEnglish": "Stew"}'))

    result = run.extract_from_url("https://example.com/stew", "<html>stew</html>", "sk-test", session=session)

    assert result.ok
    prompt = _sent_text(session)
    assert "URL: https://example.com/stew" in prompt
    assert prompt.endswith("Page content:\n<html>stew</html>")


def test_llm_failures_are_returned_not_raised():
    session = FakeSession(
        FakeResponse(529, "overloaded"),
        requests.Timeout("slow"),
        claude_response({"type": "tool_use", "id": "t"}),
    )

    http = run.extract_from_text("x", "sk-test", session=session)
    timeout = run.extract_from_text("x", "sk-test", session=session)
    no_text = run.extract_from_text("x", "sk-test", session=session)

    assert isinstance(http.error, HttpError) and http.error.status_code == 529
    assert isinstance(timeout.error, RequestTimeout)
    assert isinstance(no_text.error, NoTextInResponse)


def test_undecodable_json_is_extraction_failed():
    session = FakeSession(claude_response('The list is {"a": 1}, {"b": 2}'))

    result = run.extract_from_text("x", "sk-test", session=session)

    assert isinstance(result.error, ExtractionFailed)


def test_translate_recipe_applies_partial_translation():
    recipe = Recipe(
        title_english="Soup",
        title_romanian="Supă",
        ingredients_english=[Ingredient(text="1 l water", name="water")],
        instructions_english=["Boil"],
        instructions_swedish=["Koka"],
    )
    session = FakeSession(claude_response('```json\n{"titleSwedish":"Soppa"}\n```'))

    result = run.translate_recipe(recipe, "sk-test", session=session)

    translated = result.unwrap()
    assert translated.title_swedish == "Soppa"
    assert translated.title_romanian == "Supă"
    assert translated.ingredients_english == recipe.ingredients_english
    assert translated.instructions_swedish == ["Koka"]
    assert translated.id == recipe.id
    prompt = _sent_text(session)
    assert '"titleEnglish":"Soup"' in prompt
    assert prompt.startswith("\nTranslate the following recipe content to Swedish and Romanian.")


def test_url_to_recipe_fetches_then_extracts():
    fetch_session = FakeSession(redirect("/new-path", 301), FakeResponse(200, "<html>pancakes</html>"))
    llm_session = FakeSession(claude_response(PANCAKES_ANSWER))

    result = run.url_to_recipe("https://example.com/old", "sk-test", fetch_session=fetch_session, session=llm_session)

    assert result.value.title_english == "Pancakes"
    assert "Page content:\n<html>pancakes</html>" in _sent_text(llm_session)
    assert "URL: https://example.com/old" in _sent_text(llm_session)


def test_url_to_recipe_stops_on_fetch_failure():
    fetch_session = FakeSession(FakeResponse(403, "forbidden"))
    llm_session = FakeSession()

    result = run.url_to_recipe("https://example.com/", "sk-test", fetch_session=fetch_session, session=llm_session)

    assert isinstance(result.error, HttpError)
    assert llm_session.calls == []


def test_unparseable_servings_does_not_fail_extraction():
    session = FakeSession(
        claude_response('{"titleEnglish":"Pancakes","servings":"4²"}'),
        claude_response('{"titleEnglish":"Pancakes","servings":"²"}'),
    )

    for _ in range(2):
        result = run.extract_from_text("pancakes", "sk-test", session=session)
        assert result.ok
        assert result.value.title_english == "Pancakes"
        assert result.value.servings is None
