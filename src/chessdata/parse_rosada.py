"""Rosada (Czech rating database) player profile parser."""

import logging

from bs4 import BeautifulSoup

from chessdata.models import RosadaProfile

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


def _rating_after_label(soup: BeautifulSoup, label: str) -> str:
    for td in soup.find_all("td"):
        if td.get_text(strip=True) != label:
            continue
        value_td = td.find_next_sibling("td")
        if value_td is None:
            return NOT_AVAILABLE
        # FIDE rating is a link to the FIDE profile; national rating is text
        link = value_td.find("a")
        text = (link or value_td).get_text(strip=True)
        return text if text.isdigit() else NOT_AVAILABLE
    return NOT_AVAILABLE


def parse_rosada_profile(html: str, rosada_id: str, source_url: str) -> RosadaProfile:
    soup = BeautifulSoup(html, "html.parser")
    profile = RosadaProfile(
        id=rosada_id,
        elo_cr=_rating_after_label(soup, "Elo ČR"),
        elo_fide=_rating_after_label(soup, "Elo FIDE"),
        url=source_url,
    )
    logger.debug("Rosada %s: CR=%s FIDE=%s", rosada_id, profile.elo_cr, profile.elo_fide)
    return profile
