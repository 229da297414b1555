"""Fixed prompts sent to the model. The response parser depends on their JSON layout."""

from __future__ import annotations

from recipe_manager.models.tags import TAG_KEYS


EXTRACTION_PROMPT = """
You are a recipe extraction assistant. Extract the recipe information from the provided content and return it as a JSON object.

IMPORTANT: Return ONLY valid JSON, no additional text or explanation.

The JSON must have this exact structure:
{
  "titleEnglish": "Recipe title in English",
  "titleSwedish": "Recipe title in Swedish",
  "titleRomanian": "Recipe title in Romanian",
  "ingredientsEnglish": [
    {"text": "full ingredient text", "amount": "2", "unit": "cups", "name": "flour"}
  ],
  "ingredientsSwedish": [
    {"text": "full ingredient text in Swedish", "amount": "475", "unit": "ml", "name": "vetemjöl"}
  ],
  "ingredientsRomanian": [
    {"text": "full ingredient text in Romanian", "amount": "475", "unit": "ml", "name": "făină"}
  ],
  "instructionsEnglish": ["Step 1...", "Step 2..."],
  "instructionsSwedish": ["Steg 1...", "Steg 2..."],
  "instructionsRomanian": ["Pasul 1...", "Pasul 2..."],
  "servings": 4,
  "prepTime": "15 mins",
  "cookTime": "30 mins",
  "tags": ["vegetarian", "quickEasy"],
  "detectedLanguage": "English"
}

Rules:
1. Convert all measurements to metric (g, ml, kg, L)
2. Translate all content to English, Swedish, and Romanian
3. Detect and include relevant tags from: """ + ", ".join(TAG_KEYS) + """
4. Extract servings as integer, times as strings
5. Ensure all arrays have matching lengths across languages
"""

TRANSLATION_PROMPT = """
Translate the following recipe content to Swedish and Romanian. Return ONLY valid JSON with the translations.

Input recipe:
%s

Return JSON with this structure:
{
  "titleSwedish": "...",
  "titleRomanian": "...",
  "ingredientsSwedish": [{"text": "...", "amount": "...", "unit": "...", "name": "..."}],
  "ingredientsRomanian": [{"text": "...", "amount": "...", "unit": "...", "name": "..."}],
  "instructionsSwedish": ["..."],
  "instructionsRomanian": ["..."],
  "notesSwedish": "..." or null,
  "notesRomanian": "..." or null
}
"""


def text_prompt(text: str) -> str:
    return f"{EXTRACTION_PROMPT}\n\nRecipe content:\n{text}"


def url_prompt(url: str, html_content: str) -> str:
    return f"{EXTRACTION_PROMPT}\n\nURL: {url}\n\nPage content:\n{html_content}"


def translation_prompt(recipe_json: str) -> str:
    return TRANSLATION_PROMPT % recipe_json
