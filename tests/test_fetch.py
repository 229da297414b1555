import requests

from recipe_manager.errors import (
    HttpError,
    MissingLocationHeader,
    NetworkError,
    RequestTimeout,
    TooManyRedirects,
)
from recipe_manager.ingest.fetch import MAX_REDIRECTS, fetch_html, fetch_url

from fakes import FakeResponse, FakeSession, redirect


def test_follows_five_redirects_then_returns_body():
    hops = [redirect(f"https://example.com/hop{i}") for i in range(MAX_REDIRECTS)]
    session = FakeSession(*hops, FakeResponse(200, "<html>final</html>"))

    result = fetch_url("https://example.com/start", session=session)

    assert result.ok
    assert result.value == "<html>final</html>"
    assert len(session.calls) == 6
    assert session.calls[-1]["url"] == "https://example.com/hop4"


def test_sixth_redirect_fails_with_too_many_redirects():
    hops = [redirect(f"https://example.com/hop{i}") for i in range(MAX_REDIRECTS + 1)]
    session = FakeSession(*hops, FakeResponse(200, "never reached"))

    result = fetch_url("https://example.com/start", session=session)

    assert not result.ok
    assert isinstance(result.error, TooManyRedirects)
    assert len(session.calls) == 6


def test_relative_location_resolves_against_previous_url():
    session = FakeSession(
        redirect("/new-path", status=301),
        FakeResponse(200, "<html>...</html>"),
    )

    body = fetch_html("https://example.com/recipes/old", session=session)

    assert body == "<html>...</html>"
    assert session.calls[1]["url"] == "https://example.com/new-path"


def test_each_redirect_code_is_followed():
    for status in (301, 302, 303, 307, 308):
        session = FakeSession(redirect("next", status=status), FakeResponse(200, "ok"))
        assert fetch_html("https://example.com/a/b", session=session) == "ok"
        assert session.calls[1]["url"] == "https://example.com/a/next"


def test_redirect_without_location_fails():
    session = FakeSession(FakeResponse(302))

    result = fetch_url("https://example.com/", session=session)

    assert isinstance(result.error, MissingLocationHeader)
    assert result.error.status_code == 302


def test_non_2xx_terminal_response_is_http_error():
    session = FakeSession(FakeResponse(404, "not here"))

    result = fetch_url("https://example.com/missing", session=session)

    assert isinstance(result.error, HttpError)
    assert result.error.status_code == 404
    assert result.error.body == "not here"


def test_timeout_and_connection_errors_are_mapped():
    session = FakeSession(requests.Timeout("slow"))
    assert isinstance(fetch_url("https://example.com/", session=session).error, RequestTimeout)

    session = FakeSession(requests.ConnectionError("dns"))
    assert isinstance(fetch_url("https://example.com/", session=session).error, NetworkError)


def test_sends_browser_headers_and_disables_auto_redirects():
    session = FakeSession(FakeResponse(200, "ok"))

    fetch_html("https://example.com/", session=session, timeout=12)

    call = session.calls[0]
    assert call["allow_redirects"] is False
    assert call["timeout"] == (12, 12)
    assert call["headers"]["User-Agent"].startswith("Mozilla/5.0")
    assert "Accept-Language" in call["headers"]


def test_body_is_decoded_as_utf8_whatever_the_content_type():
    session = FakeSession(
        FakeResponse(200, "Smörgåstårta".encode("utf-8"), headers={"Content-Type": "text/html; charset=ISO-8859-1"})
    )

    assert fetch_html("https://example.com/", session=session) == "Smörgåstårta"
