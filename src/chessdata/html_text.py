"""Row/cell tokenizer and text normalizer for chess-results style tables.

Pages are split with plain string operations rather than a DOM. Malformed
markup never raises; a damaged row yields fewer cells.
"""

import re
from urllib.parse import urlsplit

_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_NUMERIC_ENTITY = re.compile(r"&#(\d+);")
_HREF = re.compile(r'href="([^"]+)"')
_ROW_MARKER = re.compile(r'class="CRg[12]"')
_ROW_MARKER_BOLD = re.compile(r'class="CRg[12]b?"')
_HEADER_CELL = re.compile(r"<th[\s>]", re.IGNORECASE)
_ROW_OPEN = re.compile(r"<tr", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")

# &amp; goes last so "&amp;lt;" decodes to "&lt;" and not "<"
_NAMED_ENTITIES = [
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&frac12;", "½"),
]

SPLIT_ROW_END = "row_end"
SPLIT_ROW_START = "row_start"
SPLIT_CLASSED_ROW = "classed_row"


def _numeric_entity(m: re.Match) -> str:
    try:
        return chr(int(m.group(1)))
    except (ValueError, OverflowError):
        return m.group(0)


def decode_entities(text: str) -> str:
    for entity, char in _NAMED_ENTITIES:
        text = text.replace(entity, char)
    text = _NUMERIC_ENTITY.sub(_numeric_entity, text)
    return text.replace("&amp;", "&")


def _clean_once(text: str) -> str:
    text = _TAG.sub(" ", text)
    text = decode_entities(text)
    return _WHITESPACE.sub(" ", text).strip()


def clean(fragment: str | None) -> str:
    """Strip tags, decode entities and collapse whitespace.

    Repeats until nothing changes, so entity-encoded markup such as
    ``&lt;b&gt;`` is removed as well and clean(clean(x)) == clean(x).
    """
    if not fragment:
        return ""
    text = _clean_once(fragment)
    while True:
        again = _clean_once(text)
        if again == text:
            return text
        text = again


def split_rows(html: str, strategy: str = SPLIT_ROW_END) -> list[str]:
    """Split a page into row fragments.

    row_end      split after each ``</tr>``; fine for flat standings and
                 schedule pages.
    row_start    split before each ``<tr`` (case-insensitive), keeping the
                 opening token on every fragment.
    classed_row  split on ``<tr class="`` and re-prefix it, so rows of nested
                 tables on board-detail pages keep their class attribute.
    """
    if strategy == SPLIT_ROW_END:
        return html.split("</tr>")
    if strategy == SPLIT_ROW_START:
        starts = [m.start() for m in _ROW_OPEN.finditer(html)]
        if not starts:
            return [html]
        bounds = [0] + starts + [len(html)]
        return [html[a:b] for a, b in zip(bounds, bounds[1:]) if html[a:b]]
    if strategy == SPLIT_CLASSED_ROW:
        token = '<tr class="'
        return [token + part for part in html.split(token)]
    raise ValueError(f"Unknown row split strategy: {strategy}")


def row_tail(fragment: str) -> str:
    """The fragment from its last ``<tr`` on, dropping text between rows."""
    starts = [m.start() for m in _ROW_OPEN.finditer(fragment)]
    return fragment[starts[-1]:] if starts else fragment


def cells_of(row: str) -> list[str]:
    """Split a row fragment into cell fragments (``</td>``, else ``</th>``)."""
    cells = row.split("</td>")
    if len(cells) < 3:
        header_cells = row.split("</th>")
        if len(header_cells) > len(cells):
            return header_cells
    return cells


def cell_text(cells: list[str], index: int) -> str:
    """Cleaned text of cells[index]; empty when the cell does not exist."""
    if 0 <= index < len(cells):
        return clean(cells[index])
    return ""


def is_data_row(row: str, allow_bold: bool = False) -> bool:
    """True for CRg1/CRg2 body rows (and CRg1b/CRg2b when allow_bold)."""
    pattern = _ROW_MARKER_BOLD if allow_bold else _ROW_MARKER
    return pattern.search(row) is not None


def has_header_cell(row: str) -> bool:
    return _HEADER_CELL.search(row) is not None


def parse_locale_float(text: str) -> float | None:
    """Parse "4,5" or "4.5" as 4.5; None when it is not a number."""
    m = _LEADING_NUMBER.match((text or "").replace(",", "."))
    return float(m.group(1)) if m else None


def parse_int(text: str) -> int | None:
    """Leading integer of text, like a lenient parseInt; None otherwise."""
    m = re.match(r"\s*([+-]?\d+)", text or "")
    return int(m.group(1)) if m else None


def extract_href(fragment: str) -> str | None:
    m = _HREF.search(fragment or "")
    return m.group(1).replace("&amp;", "&") if m else None


def resolve_href(href: str | None, source_url: str) -> str | None:
    """Make a possibly relative href absolute against source_url's origin."""
    if not href:
        return None
    if href.startswith("http://") or href.startswith("https://"):
        return href
    parts = urlsplit(source_url)
    origin = f"{parts.scheme}://{parts.netloc}"
    if href.startswith("/"):
        return origin + href
    return origin + "/" + href
