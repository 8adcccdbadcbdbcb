"""
Page fetching and text extraction for jw.org and wol.jw.org pages.

PageFetcher is the only part of the package that touches the network.
Anything with a compatible get_soup(url) method can stand in for it.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from urllib.parse import urlsplit

import requests
from bs4 import BeautifulSoup, Tag

from .errors import InvalidUrl, LookupFailed

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (compatible; JWLLinker/1.0) "
        "Gecko/20100101 Firefox/120.0"
    )
}
REQUEST_TIMEOUT = 30  # seconds


class TargetType(Enum):
    SCRIPTURE = "scripture"  # verse elements of a jw.org bible page
    JWONLINE = "jwonline"    # page <title>
    PUBNAV = "pubnav"        # #publicationNavigation block of a wol page


def is_valid_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class PageFetcher:
    """Fetches pages over one requests session and parses them with lxml."""

    def __init__(self, session: requests.Session | None = None, timeout: int = REQUEST_TIMEOUT):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)

    def get_soup(self, url: str) -> BeautifulSoup:
        """
        GET a page and return its parsed document.

        Raises InvalidUrl before any request for a malformed url, and
        LookupFailed for a transport error or any status other than 200.
        """
        if not is_valid_url(url):
            raise InvalidUrl(url)
        logger.info("Fetching %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise LookupFailed(url, f"timeout after {self.timeout}s")
        except requests.RequestException as e:
            raise LookupFailed(url, str(e))
        if resp.status_code != 200:
            raise LookupFailed(url, f"HTTP {resp.status_code}")
        return BeautifulSoup(resp.text, "lxml")

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


# ── Text extraction ───────────────────────────────────────────────────────────

_BLOCK_RE = re.compile(r'<span class="(?:newblock|parabreak)"></span>')


def extract_plain_text(html: str | Tag, target: TargetType | None = None) -> str:
    """
    Strip markup from a page fragment (an element's inner html).

    Block markers become newlines. Scripture and page-title text also get
    a space after , . ; and lose the +*# annotation marks. Navigation text
    is flattened onto one line.
    """
    if isinstance(html, Tag):
        html = html.decode_contents()
    html = html.replace("&nbsp;", " ")
    html = _BLOCK_RE.sub("\n", html)
    text = BeautifulSoup(html, "lxml").get_text() if html.strip() else ""
    text = text.replace("\xa0", " ")

    if target in (TargetType.SCRIPTURE, TargetType.JWONLINE):
        text = text.replace("  ", " ")
        text = re.sub(r"([,.;])(\w)", r"\1 \2", text)
        text = re.sub(r"[+*#]", "", text)
        text = text.replace("\r\n", "\n")
        text = re.sub(r"\n{2,4}", "\n", text)
    elif target is TargetType.PUBNAV:
        text = re.sub(r"[\t\n\r]", " ", text)

    text = re.sub(r" {2,}", " ", text)
    return text.strip()


def first_x_words(text: str, count: int) -> str:
    """The first `count` words followed by an ellipsis, or text as is if short enough."""
    words = re.split(r"\s", text)
    if len(words) > count:
        return " ".join(words[:count]) + "…"
    return text
