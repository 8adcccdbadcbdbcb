"""
Verse identifiers used in JW Library and jw.org links.

A verse id is BBCCCVVV: book (2 digits), chapter (3), verse (3), e.g.
Genesis 2:6 -> 01002006. A range joins two ids with "-":
1 Corinthians 13:4-7 -> 46013004-46013007.

The jw.org pages mark each verse with an element id "v" + book + CCC + VVV,
where the book number is NOT zero padded (Genesis 2:6 -> "v1002006").
"""
from __future__ import annotations

import re
from urllib.parse import parse_qs, urlsplit

from .config import JWL_FINDER, URL_PARAM, WEB_FINDER

_ID_RE = re.compile(r"^(\d{2})(\d{3})(\d{3})$")


def _check(book: int, chapter: int, verse: int) -> None:
    if not (0 <= book <= 99 and 0 <= chapter <= 999 and 0 <= verse <= 999):
        raise ValueError(f"Cannot encode book {book}, chapter {chapter}, verse {verse}")


def encode(book: int, chapter: int, verse: int, last_verse: int | None = None) -> str:
    """
    Verse id for a single verse, or a range id when last_verse is after verse.

    >>> encode(1, 2, 6)
    '01002006'
    >>> encode(46, 13, 4, 7)
    '46013004-46013007'
    """
    _check(book, chapter, verse)
    book_chp = f"{book:02d}{chapter:03d}"
    verse_id = f"{book_chp}{verse:03d}"
    if last_verse is not None and last_verse > verse:
        _check(book, chapter, last_verse)
        verse_id += f"-{book_chp}{last_verse:03d}"
    return verse_id


def decode(verse_id: str) -> tuple[int, int, int]:
    """Inverse of encode() for a single verse id: '01002006' -> (1, 2, 6)."""
    m = _ID_RE.match(verse_id.strip())
    if not m:
        raise ValueError(f"Not a verse id: {verse_id!r}")
    book, chapter, verse = (int(g) for g in m.groups())
    return book, chapter, verse


def decode_range(range_id: str) -> tuple[tuple[int, int, int], tuple[int, int, int]]:
    """Decode 'BBCCCVVV' or 'BBCCCVVV-BBCCCVVV' into its first and last verse."""
    first, sep, last = range_id.strip().partition("-")
    begin = decode(first)
    return begin, decode(last) if sep else begin


def verse_element_ids(book: int, chapter: int, first: int, last: int) -> list[str]:
    """Per-verse page element ids (without the 'v') from first to last inclusive."""
    return [f"{book}{chapter:03d}{verse:03d}" for verse in range(first, last + 1)]


def library_url(verse_id: str) -> str:
    return f"{JWL_FINDER}{URL_PARAM}{verse_id}"


def web_url(verse_id: str, locale: str | None = None) -> str:
    url = f"{WEB_FINDER}{URL_PARAM}{verse_id}"
    if locale:
        url += f"&wtlocale={locale}"
    return url


def finder_verse_id(url: str) -> str | None:
    """The bible= value of a JW Library or jw.org finder link, if it has one."""
    query = url.split("?", 1)[1] if "?" in url else ""
    values = parse_qs(query).get("bible")
    return values[0] if values else None


def wol_params(url: str) -> tuple[str, str]:
    """
    Document id and paragraph id of a WOL url.

    https://wol.jw.org/en/wol/d/r1/lp-e/2023401#h=12 -> ("2023401", "12")
    The paragraph id is "" when the url has no #h= fragment.
    """
    parts = urlsplit(url)
    doc_id = parts.path.rstrip("/").split("/")[-1]
    par_id = parse_qs(parts.fragment).get("h", [""])[0]
    return doc_id, par_id
