"""
Citations: replace the reference or wol.jw.org link at the caret with the
quoted verse or paragraph text fetched from jw.org.

  > [!verse] BIBLE — [Psalms 23:1](jwlibrary:///finder?bible=19023001)
  > **1** Jehovah is my Shepherd. I will lack nothing.

Fetching goes through a PageFetcher (or anything with a get_soup method),
one request per chapter of the reference. Failures come back as a Result
error, never as an exception.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from itertools import groupby

from bs4 import Tag

from .bible_data import LOCALES
from .config import DEFAULT_SETTINGS, Settings
from .errors import InvalidUrl, LookupFailed, Result, ResultError
from .linker import render_reference, wol_link_at
from .parser import match_potential_scriptures
from .passages import DisplayType, validate_scripture
from .scraper import PageFetcher, TargetType, extract_plain_text, first_x_words, is_valid_url
from .verse_ids import wol_params

logger = logging.getLogger(__name__)

_NUM_RE = re.compile(r"^(\d{1,3}) ")
_BLOCK_CLASSES = {"style-l", "newblock"}


class CiteType(Enum):
    SCRIPTURE_ENTIRE = "scriptureEntire"
    SCRIPTURE_SNIPPET = "scriptureSnippet"
    WOL_ENTIRE = "wolEntire"
    WOL_SNIPPET = "wolSnippet"
    WOL_TITLE = "wolTitle"


def _fill(template: str, title: str, text: str) -> str:
    return template.replace("{title}", title).replace("{text}", text)


def _bold_number(text: str, settings: Settings) -> str:
    return _NUM_RE.sub(r"**\1** ", text, count=1) if settings.bold_verse_no else text


def _verse_line(elem: Tag, first: bool, settings: Settings) -> str:
    clean = extract_plain_text(elem, TargetType.SCRIPTURE)
    if elem.select_one(".chapterNum") is not None:
        # the opening verse of a chapter shows the chapter number instead
        clean = _NUM_RE.sub("1 ", clean, count=1)
        glue = "" if first else " "
    elif first:
        glue = ""
    else:
        child = next((c for c in elem.children if isinstance(c, Tag)), None)
        classes = set(child.get("class") or []) if child is not None else set()
        glue = "\n" if classes & _BLOCK_CLASSES else " "
    return glue + _bold_number(clean, settings)


def add_bible_citation(
    text: str,
    caret: int,
    settings: Settings = DEFAULT_SETTINGS,
    cite_type: CiteType = CiteType.SCRIPTURE_ENTIRE,
    fetcher=None,
) -> Result:
    """Replace the reference at the caret with its verses quoted in full or as a snippet."""
    matches = match_potential_scriptures(text, caret, settings.lang)
    if not matches:
        return Result(text, error=ResultError.INVALID_SCRIPTURE)
    match = matches[0]
    ref = validate_scripture(match, settings, DisplayType.CITE)
    if not ref.valid:
        return Result(text, error=ResultError.INVALID_SCRIPTURE)

    title = render_reference(ref, DisplayType.MD, settings) if settings.citation_link else ref.display
    locale = LOCALES[settings.lang]
    own_fetcher = fetcher is None
    fetcher = fetcher or PageFetcher()
    lines: list[str] = []
    try:
        for _, group in groupby(ref.passages, key=lambda p: p.chapter):
            passages = list(group)
            soup = fetcher.get_soup(passages[0].jworg(locale))
            for passage in passages:
                for verse_id in passage.verse_ids:
                    elem = soup.select_one(f"#v{verse_id}")
                    if elem is None:
                        logger.debug("No element #v%s on the page", verse_id)
                        continue
                    lines.append(_verse_line(elem, not lines, settings))
    except (InvalidUrl, LookupFailed) as e:
        logger.warning("Citation lookup failed: %s", e)
        return Result(text, error=ResultError.ONLINE_LOOKUP_FAILED)
    finally:
        if own_fetcher:
            fetcher.close()

    verses = "".join(lines)
    if not verses:
        logger.warning("No verse text found for %s", ref.display)
        return Result(text, error=ResultError.ONLINE_LOOKUP_FAILED)

    if cite_type is CiteType.SCRIPTURE_SNIPPET:
        citation = _fill(settings.snippet_template, title, first_x_words(verses, settings.snippet_length))
    else:
        citation = _fill(settings.scripture_template, title, verses)
    return Result(text[:match.begin] + citation + text[match.end:], changed=True)


def add_paragraph_citation(
    text: str,
    caret: int,
    settings: Settings = DEFAULT_SETTINGS,
    cite_type: CiteType = CiteType.WOL_ENTIRE,
    fetcher=None,
) -> Result:
    """Replace the wol.jw.org link at the caret with a titled paragraph citation."""
    link = wol_link_at(text, caret)
    url = link.group(3) if link else ""
    if not is_valid_url(url):
        return Result(text, error=ResultError.INVALID_URL)

    own_fetcher = fetcher is None
    fetcher = fetcher or PageFetcher()
    try:
        soup = fetcher.get_soup(url)
    except (InvalidUrl, LookupFailed) as e:
        logger.warning("Paragraph lookup failed: %s", e)
        return Result(text, error=ResultError.ONLINE_LOOKUP_FAILED)
    finally:
        if own_fetcher:
            fetcher.close()

    page_title = extract_plain_text(soup.title, TargetType.JWONLINE) if soup.title else ""
    nav = soup.select_one("#publicationNavigation")
    page_nav = extract_plain_text(nav, TargetType.PUBNAV) if nav is not None else ""
    if not page_title:
        logger.warning("No page title at %s", url)
        return Result(text, error=ResultError.ONLINE_LOOKUP_FAILED)

    paragraph = ""
    if cite_type is not CiteType.WOL_TITLE:
        _, par_id = wol_params(url)
        # fragment ids need not be valid CSS ("1.2")
        elem = soup.find(id=f"p{par_id}") if par_id else None
        if elem is None:
            logger.warning("No paragraph %r at %s", par_id, url)
            return Result(text, error=ResultError.ONLINE_LOOKUP_FAILED)
        paragraph = extract_plain_text(elem)

    title = f"[{page_nav or page_title}]({url})"
    if cite_type is CiteType.WOL_TITLE:
        citation = title
    elif cite_type is CiteType.WOL_SNIPPET:
        citation = _fill(settings.snippet_template, title, first_x_words(paragraph, settings.snippet_length))
    else:
        citation = _fill(settings.paragraph_template, title, _bold_number(paragraph, settings))
    return Result(text[:link.start()] + citation + text[link.end():], changed=True)
