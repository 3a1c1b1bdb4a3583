"""Common utilities and exception classes."""


class ChessdataError(Exception):
    """Base exception for chessdata."""


class FetchError(ChessdataError):
    """HTTP fetch failure after retries."""


class BlockedPageError(FetchError):
    """Site refused the request or served a near-empty page."""


class ParseError(ChessdataError):
    """HTML parse failure."""


class ParseYieldedEmpty(ParseError):
    """Page fetched fine but no structured rows came out of it."""


class ConfigError(ChessdataError):
    """Invalid or missing configuration."""


def require_rows(rows: list, what: str, url: str) -> list:
    """Return rows unchanged, raising ParseYieldedEmpty if there are none."""
    if not rows:
        raise ParseYieldedEmpty(f"No {what} rows parsed from {url}")
    return rows
