"""HTTP fetch with retry, backoff, sleep, and caching."""

import logging
import random
import time
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from chessdata import config
from chessdata.util import BlockedPageError, FetchError

logger = logging.getLogger(__name__)

HEADERS = {"User-Agent": config.USER_AGENT}

# Parameters that scope a view to one team, node or round
_SCOPED_PARAMS = {"snr", "SNode", "rd"}
_REFUSED_STATUSES = {403, 429}


def view_url(url: str, art: int, **params: object) -> str:
    """Rewrite a competition URL to another chess-results view.

    >>> view_url("https://s2.chess-results.com/tnr1.aspx?lan=5&art=46&SNode=S0", 3, rd=2)
    'https://s2.chess-results.com/tnr1.aspx?lan=5&art=3&rd=2'
    """
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True)
             if k not in _SCOPED_PARAMS]
    if any(k == "art" for k, _ in query):
        query = [(k, str(art) if k == "art" else v) for k, v in query]
    else:
        query.append(("art", str(art)))
    query.extend((k, str(v)) for k, v in params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


def standings_url(url: str) -> str:
    return view_url(url, config.ART_STANDINGS)


def schedule_url(url: str) -> str:
    return view_url(url, config.ART_SCHEDULE)


def boards_url(url: str, round_no: int | str) -> str:
    return view_url(url, config.ART_BOARDS, rd=round_no)


def roster_url(url: str, snr: int | str) -> str:
    return view_url(url, config.ART_ROSTER, snr=snr)


def chesscz_url(competition_id: str) -> str:
    return config.CHESSCZ_URL.format(id=competition_id)


def rosada_url(rosada_id: str) -> str:
    return config.ROSADA_URL.format(id=rosada_id)


def _get_once(url: str) -> str:
    """One GET; raises FetchError (BlockedPageError when refused)."""
    try:
        resp = requests.get(url, headers=HEADERS, timeout=config.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise FetchError(f"Connection error for {url}: {e}") from e

    if resp.status_code in _REFUSED_STATUSES:
        raise BlockedPageError(f"HTTP {resp.status_code} for {url}, request refused")
    if resp.status_code != 200:
        raise FetchError(f"HTTP {resp.status_code} for {url}")
    # chess-results answers some blocked clients with a near-empty 200 page
    if len(resp.text) < config.MIN_PAGE_LENGTH:
        raise BlockedPageError(
            f"Page from {url} is only {len(resp.text)} chars, possibly blocked"
        )
    return resp.text


def fetch_page(url: str) -> str:
    """Fetch a chess-results page, retrying with exponential backoff.

    Non-200 answers, connection errors and blocked (refused or near-empty)
    pages are all retried. The last error is raised as FetchError, or as
    BlockedPageError when the site kept refusing.
    """
    last_error: FetchError | None = None
    for attempt in range(1, config.MAX_RETRIES + 1):
        logger.debug("Fetching %s (attempt %d/%d)", url, attempt, config.MAX_RETRIES)
        try:
            html = _get_once(url)
        except FetchError as e:
            logger.warning("%s (attempt %d/%d)", e, attempt, config.MAX_RETRIES)
            last_error = e
        else:
            logger.debug("OK %s (%d chars)", url, len(html))
            return html

        if attempt < config.MAX_RETRIES:
            backoff = config.BACKOFF_BASE * (2 ** (attempt - 1))
            logger.debug("Backoff %ds before retry", backoff)
            time.sleep(backoff)

    raise last_error  # type: ignore[misc]


def _page_sleep() -> None:
    """Random sleep between page fetches."""
    delay = random.uniform(config.SLEEP_MIN, config.SLEEP_MAX)
    time.sleep(delay)


def fetch_with_cache(
    url: str,
    cache_path: Path | None,
    use_cache: bool,
) -> str:
    """Fetch a page, optionally using/saving a raw HTML copy on disk."""
    if use_cache and cache_path and cache_path.exists():
        logger.info("Cache hit: %s", cache_path)
        return cache_path.read_text(encoding="utf-8")

    html = fetch_page(url)
    _page_sleep()

    if use_cache and cache_path:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_text(html, encoding="utf-8")
        logger.debug("Cached to %s", cache_path)

    return html
