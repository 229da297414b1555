"""HTTP fetcher for recipe pages."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

import httpx
import requests

from recipe_manager.errors import (
    HttpError,
    MissingLocationHeader,
    NetworkError,
    RecipeError,
    RequestTimeout,
    TooManyRedirects,
)
from recipe_manager.result import Failure, Result, Success
from recipe_manager.settings import settings


logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5
REDIRECT_CODES = frozenset({301, 302, 303, 307, 308})

# Mobile browser headers; some recipe sites refuse obvious bots.
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Linux; Android 13) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "identity",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


def _get(session: requests.Session, url: str, timeout: float) -> requests.Response:
    try:
        return session.get(
            url,
            headers=BROWSER_HEADERS,
            timeout=(timeout, timeout),
            allow_redirects=False,
        )
    except requests.Timeout as e:
        raise RequestTimeout(f"Timed out fetching {url}: {e}") from e
    except requests.RequestException as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e


async def _aget(client: httpx.AsyncClient, url: str, timeout: float) -> httpx.Response:
    try:
        return await client.get(
            url,
            headers=BROWSER_HEADERS,
            timeout=httpx.Timeout(timeout),
            follow_redirects=False,
        )
    except httpx.TimeoutException as e:
        raise RequestTimeout(f"Timed out fetching {url}: {e}") from e
    except httpx.RequestError as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e


def _redirect_target(url: str, current: str, status: int, headers, hops: int) -> str | None:
    """Next URL for a redirect response, None for a terminal one."""
    logger.debug("Response code %s for %s", status, current)
    if status not in REDIRECT_CODES:
        return None
    location = headers.get("Location")
    if not location or not location.strip():
        logger.error("Redirect without Location header | url=%s status=%s", current, status)
        raise MissingLocationHeader(current, status)
    if hops >= MAX_REDIRECTS:
        logger.error("Too many redirects | url=%s", url)
        raise TooManyRedirects(url, MAX_REDIRECTS)
    target = urljoin(current, location.strip())
    logger.debug("Redirecting to: %s", target)
    return target


def _terminal_body(url: str, current: str, status: int, content: bytes | None) -> str:
    # the declared charset is ignored on purpose, pages are read as UTF-8
    body = (content or b"").decode("utf-8", errors="replace")
    if not 200 <= status < 300:
        logger.error("HTTP error %s fetching %s: %s", status, current, body[:200])
        raise HttpError(status, body)
    logger.info("Fetched %s -> %s (%d chars)", url, current, len(body))
    return body


def fetch_html(url: str, session: requests.Session | None = None, timeout: float | None = None) -> str:
    """GET the url following redirects by hand. Returns the final body as text.

    Raises a RecipeError subclass on failure.
    """
    timeout = settings.FETCH_TIMEOUT if timeout is None else timeout
    own_session = session is None
    session = requests.Session() if own_session else session
    current = url
    hops = 0
    try:
        while True:
            logger.debug("Fetching URL: %s", current)
            resp = _get(session, current, timeout)
            target = _redirect_target(url, current, resp.status_code, resp.headers, hops)
            if target is None:
                return _terminal_body(url, current, resp.status_code, resp.content)
            current = target
            hops += 1
    finally:
        if own_session:
            session.close()


async def fetch_html_async(url: str, client: httpx.AsyncClient, timeout: float | None = None) -> str:
    """Async twin of fetch_html; cancelling the caller aborts the request in flight."""
    timeout = settings.FETCH_TIMEOUT if timeout is None else timeout
    current = url
    hops = 0
    while True:
        logger.debug("Fetching URL: %s", current)
        resp = await _aget(client, current, timeout)
        target = _redirect_target(url, current, resp.status_code, resp.headers, hops)
        if target is None:
            return _terminal_body(url, current, resp.status_code, resp.content)
        current = target
        hops += 1


def fetch_url(url: str, session: requests.Session | None = None, timeout: float | None = None) -> Result[str]:
    """Result-returning wrapper around fetch_html."""
    try:
        return Success(fetch_html(url, session=session, timeout=timeout))
    except RecipeError as e:
        return Failure(e)


async def fetch_url_async(url: str, client: httpx.AsyncClient, timeout: float | None = None) -> Result[str]:
    try:
        return Success(await fetch_html_async(url, client, timeout=timeout))
    except RecipeError as e:
        return Failure(e)
