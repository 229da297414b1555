"""Error taxonomy shared by the fetcher, the LLM client and the orchestrator."""

from __future__ import annotations


class RecipeError(Exception):
    """Base class for every failure the extraction pipeline reports."""


class NetworkError(RecipeError):
    """DNS, connection or transport failure."""


class RequestTimeout(RecipeError):
    """Connect or read timeout expired."""


class HttpError(RecipeError):
    """Non-2xx response from the recipe site or the LLM endpoint."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP error {status_code}: {body[:200]}")


class FetchError(RecipeError):
    pass


class TooManyRedirects(FetchError):
    def __init__(self, url: str, max_redirects: int):
        self.url = url
        self.max_redirects = max_redirects
        super().__init__(f"Too many redirects (> {max_redirects}) starting at {url}")


class MissingLocationHeader(FetchError):
    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Redirect {status_code} from {url} without Location header")


class LlmError(RecipeError):
    pass


class NoTextInResponse(LlmError):
    def __init__(self, message: str = "No text response from API"):
        super().__init__(message)


class ExtractionFailed(RecipeError):
    """No JSON object could be located or decoded in the model's answer."""

    def __init__(self, cause: BaseException | str):
        self.cause = cause
        super().__init__(f"Failed to extract recipe: {cause}")
