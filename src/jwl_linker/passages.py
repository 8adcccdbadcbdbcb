"""
Passage validation: turns a ScriptureMatch into a Reference of validated
passages with display text, verse ids and links.

  Ps 5:10           -> Psalms 5:10              19005010
  1 Co 13:4-7       -> 1 Corinthians 13:4-7     46013004-46013007
  Ps 23:1,2         -> Psalms 23:1, 2           19023001-19023002
  Gen 1:1, 3; 2:4   -> Genesis 1:1, 3; 2:4      three passages
  Jude 1:5          -> Jude 5                   65001005

A passage that fails validation keeps its display text and carries
ResultError.INVALID_SCRIPTURE; its sibling passages are unaffected.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .bible_data import Book, get_book, max_verse
from .config import DEFAULT_SETTINGS, Settings
from .errors import ResultError, UnknownChapter
from .parser import ScriptureMatch, resolve_book
from .verse_ids import encode, library_url, verse_element_ids, web_url

logger = logging.getLogger(__name__)


class DisplayType(Enum):
    URL = "url"      # <a href="jwlib" title="jwlib">display</a>
    MD = "md"        # [display](jwlib)
    PLAIN = "plain"  # display only
    FIRST = "first"  # first verse only, no link
    CITE = "cite"    # links plus the per-verse ids needed to fetch the text


class Prefix(Enum):
    BOOK_CHAPTER = "book_chapter"  # "Genesis 1:" - first passage of a reference
    CHAPTER = "chapter"            # "2:" - passage opening a new chapter
    NONE = "none"                  # "" - another verse of the same chapter


@dataclass(frozen=True)
class Passage:
    book: int
    chapter: int
    first: int
    last: int
    separator: str                 # "-", "," or "" for a single verse
    prefix: Prefix
    display: str
    error: ResultError
    begin: int
    end: int
    canonical_id: str = ""
    verse_ids: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.error

    @property
    def jwlib(self) -> str:
        return library_url(self.canonical_id) if self.canonical_id else ""

    def jworg(self, locale: str | None = None) -> str:
        return web_url(self.canonical_id, locale) if self.canonical_id else ""


@dataclass(frozen=True)
class Reference:
    book: int | None
    book_name: str
    passages: tuple[Passage, ...]
    display: str
    reference: str
    plain: bool
    is_link: bool
    begin: int
    end: int
    display_type: DisplayType
    focus: int | None = None

    @property
    def resolved(self) -> bool:
        return self.book is not None

    @property
    def valid(self) -> bool:
        return self.resolved and bool(self.passages) and all(p.valid for p in self.passages)

    @property
    def error(self) -> ResultError:
        return ResultError.NONE if self.valid else ResultError.INVALID_SCRIPTURE

    @property
    def focused(self) -> Passage | None:
        """The passage the caret was in, when the match was taken at a caret."""
        if self.focus is None or not self.passages:
            return None
        return self.passages[min(self.focus, len(self.passages) - 1)]


def parse_verse_token(text: str) -> tuple[int, int, str]:
    """
    "5" -> (5, 5, ""), "4-7" -> (4, 7, "-"), "4,5,6" -> (4, 6, ",").

    An inverted range "7-4" becomes the single verse 7. A comma list whose
    numbers are not consecutive keeps only its first verse.
    """
    if "-" in text:
        a, _, b = text.partition("-")
        first, last = int(a), int(b)
        if last < first:
            logger.debug("Inverted range %r, using verse %d only", text, first)
            last = first
        return first, last, "-"
    if "," in text:
        numbers = [int(n) for n in text.split(",")]
        if numbers != list(range(numbers[0], numbers[0] + len(numbers))):
            logger.debug("Verse list %r is not consecutive, using verse %d only", text, numbers[0])
            return numbers[0], numbers[0], ""
        return numbers[0], numbers[-1], ","
    verse = int(text)
    return verse, verse, ""


def _verse_text(first: int, last: int, separator: str, display_type: DisplayType, settings: Settings) -> str:
    if display_type is DisplayType.FIRST or last == first:
        return str(first)
    if separator == ",":
        return settings.comma.join(str(v) for v in range(first, last + 1))
    return f"{first}-{last}"


def _heading(book: Book, chapter: int, prefix: Prefix) -> str:
    show_chapter = book.has_chapters or chapter != 1
    if prefix is Prefix.BOOK_CHAPTER:
        return f"{book.name} {chapter}:" if show_chapter else f"{book.name} "
    if prefix is Prefix.CHAPTER and show_chapter:
        return f"{chapter}:"
    return ""


def _check_range(book: int, chapter: int, first: int, last: int) -> ResultError:
    try:
        top = max_verse(book, chapter)
    except UnknownChapter:
        logger.debug("Book %d has no chapter %d", book, chapter)
        return ResultError.INVALID_SCRIPTURE
    if not (1 <= first <= top and 1 <= last <= top):
        logger.debug("Book %d chapter %d has %d verses, not %d-%d", book, chapter, top, first, last)
        return ResultError.INVALID_SCRIPTURE
    return ResultError.NONE


def make_passage(
    book: Book,
    chapter: int,
    token: str,
    prefix: Prefix,
    display_type: DisplayType = DisplayType.MD,
    settings: Settings = DEFAULT_SETTINGS,
    begin: int = 0,
    end: int = 0,
) -> Passage:
    first, last, separator = parse_verse_token(token)
    error = _check_range(book.order, chapter, first, last)
    display = _heading(book, chapter, prefix) + _verse_text(first, last, separator, display_type, settings)
    canonical_id = ""
    verse_ids: tuple[str, ...] = ()
    if not error:
        canonical_id = encode(book.order, chapter, first, last)
        if display_type is DisplayType.CITE:
            verse_ids = tuple(verse_element_ids(book.order, chapter, first, last))
    return Passage(
        book=book.order,
        chapter=chapter,
        first=first,
        last=last,
        separator=separator,
        prefix=prefix,
        display=display,
        error=error,
        begin=begin,
        end=end,
        canonical_id=canonical_id,
        verse_ids=verse_ids,
    )


def join_passages(parts: list[str], passages, settings: Settings = DEFAULT_SETTINGS) -> str:
    """Join rendered passages: ", " within a chapter, "; " before a new chapter."""
    out = []
    for i, (part, passage) in enumerate(zip(parts, passages)):
        if i:
            out.append(settings.comma if passage.prefix is Prefix.NONE else settings.semicolon)
        out.append(part)
    return "".join(out)


def validate_scripture(
    match: ScriptureMatch,
    settings: Settings = DEFAULT_SETTINGS,
    display_type: DisplayType = DisplayType.MD,
) -> Reference:
    """
    Resolve the book of a match and validate each of its passages.

    An unresolved book gives a Reference with no passages (``resolved`` is
    False). Passages are listed in source order; invalid ones stay in place.
    """
    common = dict(
        reference=match.reference,
        plain=match.plain,
        is_link=match.is_link,
        begin=match.begin,
        end=match.end,
        display_type=display_type,
        focus=match.focus,
    )
    order = resolve_book(match.ordinal + match.book, settings.lang)
    if order is None:
        return Reference(book=None, book_name="", passages=(), display="", **common)

    book = get_book(order, settings.lang)
    passages: list[Passage] = []
    previous = None
    for group, token in match.tokens:
        chapter = int(group.chapter) if group.chapter is not None else 1
        if not passages:
            prefix = Prefix.BOOK_CHAPTER
        elif chapter == previous:
            prefix = Prefix.NONE
        else:
            prefix = Prefix.CHAPTER
        previous = chapter
        passages.append(make_passage(
            book, chapter, token.text, prefix, display_type, settings, token.begin, token.end,
        ))

    if display_type is DisplayType.FIRST:
        display = passages[0].display if passages else ""
    else:
        display = join_passages([p.display for p in passages], passages, settings)
    return Reference(
        book=order,
        book_name=book.name,
        passages=tuple(passages),
        display=display,
        **common,
    )
