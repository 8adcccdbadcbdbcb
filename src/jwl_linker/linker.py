"""
Link rendering: rewrites scripture references and web links in a piece of
text as JW Library links.

  add_bible_links("See Gen 2:6")
    -> "See [Genesis 2:6](jwlibrary:///finder?bible=01002006)"

  convert_to_library_urls("https://wol.jw.org/en/wol/d/r1/lp-e/2023401#h=12")
    -> "jwlibrary:///finder?&docid=2023401&par=12"

Every function returns a Result and never raises on unrecognised text.
"""
from __future__ import annotations

import logging
import re

from .config import DEFAULT_SETTINGS, JWL_FINDER, WEB_FINDER, WOL_ROOT, Settings
from .errors import Result, ResultError
from .parser import match_potential_scriptures
from .passages import DisplayType, Reference, join_passages, validate_scripture
from .verse_ids import wol_params

logger = logging.getLogger(__name__)

URL_RE = re.compile(r"https://[^\s)]+", re.IGNORECASE)
WOL_LINK_RE = re.compile(r"(\[([^\[\]]*)\]\()?(https://wol\.jw\.org[^\s)]{2,})(\))?", re.IGNORECASE)

# Headings and callout containers are left alone
_SKIP_PREFIXES = ("<h", "<div data")


def render_reference(ref: Reference, display_type: DisplayType, settings: Settings = DEFAULT_SETTINGS) -> str:
    """
    Markup for a validated reference. Each valid passage gets its own link,
    invalid passages keep their display text.
    """
    if display_type in (DisplayType.PLAIN, DisplayType.FIRST):
        return ref.display
    parts = []
    for passage in ref.passages:
        if not passage.valid:
            parts.append(passage.display)
        elif display_type is DisplayType.URL:
            parts.append(f'<a href="{passage.jwlib}" title="{passage.jwlib}">{passage.display}</a>')
        else:
            parts.append(f"[{passage.display}]({passage.jwlib})")
    return join_passages(parts, ref.passages, settings)


def add_bible_links(
    text: str,
    display_type: DisplayType = DisplayType.MD,
    settings: Settings = DEFAULT_SETTINGS,
) -> Result:
    """Replace every valid, not yet linked scripture reference in text."""
    if text.startswith(_SKIP_PREFIXES):
        return Result(text)

    error = ResultError.NONE
    replacements: list[tuple[int, int, str]] = []
    for match in match_potential_scriptures(text, lang=settings.lang):
        if match.is_link:
            continue
        kind = DisplayType.PLAIN if match.plain else display_type
        ref = validate_scripture(match, settings, kind)
        if not ref.resolved:
            logger.debug("Skipping %r: not a known book", match.reference)
            continue
        if not ref.valid:
            error = ResultError.INVALID_SCRIPTURE
        if not any(p.valid for p in ref.passages):
            continue
        markup = render_reference(ref, kind, settings)
        if match.plain:
            # keep the escape so the text stays plain on the next run
            markup = "'" + markup
        if markup != match.reference:
            replacements.append((match.begin, match.end, markup))

    result = text
    for begin, end, markup in reversed(replacements):
        result = result[:begin] + markup + result[end:]
    return Result(result, changed=bool(replacements), error=error)


def convert_to_library_urls(text: str) -> Result:
    """Swap wol.jw.org and jw.org finder urls for JW Library urls."""
    replacements: list[tuple[int, int, str]] = []
    for m in URL_RE.finditer(text):
        url = m.group()
        if url.startswith(WOL_ROOT):
            doc_id, par_id = wol_params(url)
            new = f"{JWL_FINDER}&docid={doc_id}&par={par_id}"
        elif url.startswith(WEB_FINDER):
            new = JWL_FINDER + url[len(WEB_FINDER):]
        else:
            continue
        replacements.append((m.start(), m.end(), new))

    result = text
    for begin, end, new in reversed(replacements):
        result = result[:begin] + new + result[end:]
    return Result(result, changed=bool(replacements))


def wol_link_at(text: str, caret: int) -> re.Match | None:
    for m in WOL_LINK_RE.finditer(text):
        if m.start() <= caret <= m.end():
            return m
    return None


def link_from_caret(text: str, caret: int) -> tuple[str, str, str]:
    """
    The wol.jw.org link around the caret, bare or as a markdown link.
    Returns (whole match, link title, url); all empty when there is none.
    """
    m = wol_link_at(text, caret)
    if m is None:
        return "", "", ""
    title = m.group(2) if m.group(1) else ""
    return m.group(), title or "", m.group(3)
