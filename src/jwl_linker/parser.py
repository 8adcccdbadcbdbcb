"""
Citation parser: finds scripture references in markdown or rendered HTML
and resolves their book names.

Matched formats:

  Gen 2:6                 - abbreviated book, chapter:verse
  1 Co 13:4-7             - numbered book, verse range
  Ps 23:1,2               - verse list (consecutive verses are kept together)
  Gen 1:1, 3; 2:4-6       - several verses and chapters of one book
  Gen 1:1, 2 Cor 5:17     - a listed 1-3 followed by a numbered book name starts a new reference
  Song of Solomon 2:1     - multi-word book names
  Jude 5                  - single-chapter books, verse only
  'Gen 2:6                - leading quote: show the reference but do not link it
  [Gen 2:6](...)          - followed by ] or </a>: already a link, flagged

Matching is a pure function of its input: every call returns a new list of
immutable ScriptureMatch records and keeps no scan state between calls.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from functools import lru_cache

import regex

from .bible_data import books, check_lang, lexicon, normalize_token, single_chapter_books, strip_diacritics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerseToken:
    """One verse item of a citation: "5", "4-7", or a run of consecutive verses "4,5"."""
    text: str
    begin: int
    end: int


@dataclass(frozen=True)
class ChapterGroup:
    """A chapter number (None for the verse-only form) and its verse tokens."""
    chapter: str | None
    verses: tuple[VerseToken, ...]
    begin: int
    end: int


@dataclass(frozen=True)
class ScriptureMatch:
    reference: str          # matched text, including a leading ' if present
    plain: bool             # leading ' => show without a link
    ordinal: str            # "1", "2", "3" or ""
    book: str               # book name as written
    groups: tuple[ChapterGroup, ...]
    is_link: bool           # followed by ] or </a>
    begin: int
    end: int
    focus: int | None = None  # index of the verse token under the caret

    @property
    def tokens(self) -> list[tuple[ChapterGroup, VerseToken]]:
        return [(group, token) for group in self.groups for token in group.verses]


# ── Citation regex ────────────────────────────────────────────────────────────

_SPACE = r"(?:[ \u00a0]|&nbsp;)"
_NOT_AFTER = r"(?<![\p{L}\p{M}\d])"
_LINK = r"(?P<link>\]|</a>)?"

# A verse number is never directly followed by another digit or a colon
_VERSE = r"\d{1,3}(?![\d:])"


def _ordinal_book_words(lang: str) -> list[str]:
    """Book tokens that follow an ordinal: "cor" for "2cor", "samuel" for "1 Samuel"."""
    words: set[str] = set()
    for book in books(lang):
        if not book.name[0].isdigit():
            continue
        words.update(t[1:] for t in book.abbrevs if t[0].isdigit())
        name = book.name.split(" ", 1)[1].lower()
        words.update((name, strip_diacritics(name)))
    tokens = sorted(words, key=len, reverse=True)
    return [_SPACE.join(regex.escape(part) for part in t.split()) for t in tokens]


def _verses(lang: str) -> str:
    # After a comma, a lone 1-3 followed by a numbered book name starts the
    # next reference ("1:1, 2 Cor"); any other word leaves it a verse
    next_book = (
        r"(?!" + _SPACE + r"?(?:" + "|".join(_ordinal_book_words(lang)) + r")\.?(?![\p{L}\p{M}]))"
    )
    listed = r"(?:[4-9](?![\d:])|\d{2,3}(?![\d:])|[123](?![\d:])" + next_book + r")"
    return _VERSE + r"(?: ?[-–] ?" + _VERSE + r"|, ?" + listed + r")*"


def _passages(lang: str) -> str:
    verses = _verses(lang)
    return r"\d{1,3}:" + verses + r"(?:; ?\d{1,3}:" + verses + r")*"


def _multiword_names(lang: str) -> list[str]:
    """Book names containing spaces that are not just "ordinal + name"."""
    names = [b.name for b in books(lang) if " " in b.name and not b.name[0].isdigit()]
    return [_SPACE.join(regex.escape(word) for word in name.split()) for name in names]


def _token_pattern(token: str) -> str:
    if token[0] in "123":
        return regex.escape(token[0]) + _SPACE + "?" + regex.escape(token[1:])
    return regex.escape(token)


def _build_scripture_re(lang: str) -> regex.Pattern:
    book_pat = "(?:" + "|".join(_multiword_names(lang) + [r"[\p{L}\p{M}\.]{2,}"]) + ")"
    full = (
        _NOT_AFTER
        + r"(?P<reference>"
        + r"(?P<plain>')?"
        + r"(?P<ordinal>[123]" + _SPACE + r"?)?"
        + r"(?P<book>" + book_pat + r")"
        + _SPACE + r"?"
        + r"(?P<passages>" + _passages(lang) + r")"
        + r")"
        + _LINK
    )
    return regex.compile(full, regex.IGNORECASE)


def _build_single_chapter_re(lang: str) -> regex.Pattern:
    """Verse-only citations of single-chapter books: "Jude 5", "Phm 10-12"."""
    variants: set[str] = set()
    for book in single_chapter_books(lang):
        for raw in list(book.abbrevs) + [book.name]:
            token = "".join(raw.lower().split())
            variants.add(token)
            variants.add(strip_diacritics(token))
    tokens = sorted(variants, key=len, reverse=True)
    full = (
        _NOT_AFTER
        + r"(?P<reference>"
        + r"(?P<plain>')?"
        + r"(?P<book>(?:" + "|".join(_token_pattern(t) for t in tokens) + r")\.?)"
        + _SPACE
        + r"(?P<passages>" + _verses(lang) + r")"
        + r")"
        + _LINK
    )
    return regex.compile(full, regex.IGNORECASE)


@lru_cache(maxsize=None)
def _patterns(lang: str) -> tuple[regex.Pattern, regex.Pattern]:
    return _build_scripture_re(lang), _build_single_chapter_re(lang)


_VERSE_TOKEN_RE = regex.compile(r"(\d{1,3})(?: ?[-–] ?(\d{1,3}))?")
_GROUP_RE = regex.compile(r"[^;]+")


def _verse_token(text: str, run: list, offset: int) -> VerseToken:
    if len(run) == 1:
        raw = run[0].group().replace(" ", "").replace("–", "-")
    else:
        raw = ",".join(m.group(1) for m in run)
    return VerseToken(raw, offset + run[0].start(), offset + run[-1].end())


def _split_verses(text: str, offset: int) -> tuple[VerseToken, ...]:
    """
    Split "1,2,5-7,9" into verse tokens. Consecutive single verses are kept
    together as one comma token ("1,2"), everything else stands alone.
    """
    tokens: list[VerseToken] = []
    run: list = []
    for m in _VERSE_TOKEN_RE.finditer(text):
        single = m.group(2) is None
        if single and run and int(m.group(1)) == int(run[-1].group(1)) + 1:
            run.append(m)
            continue
        if run:
            tokens.append(_verse_token(text, run, offset))
        run = [m] if single else []
        if not single:
            tokens.append(_verse_token(text, [m], offset))
    if run:
        tokens.append(_verse_token(text, run, offset))
    return tuple(tokens)


def _split_groups(text: str, offset: int, has_chapter: bool) -> tuple[ChapterGroup, ...]:
    groups: list[ChapterGroup] = []
    for chunk in _GROUP_RE.finditer(text):
        body = chunk.group()
        begin = offset + chunk.start() + (len(body) - len(body.lstrip()))
        body = body.strip()
        if has_chapter:
            chapter, _, verses = body.partition(":")
            verses_begin = begin + len(chapter) + 1
        else:
            chapter, verses, verses_begin = None, body, begin
        groups.append(ChapterGroup(
            chapter=chapter,
            verses=_split_verses(verses, verses_begin),
            begin=begin,
            end=begin + len(body),
        ))
    return tuple(groups)


def _to_match(m, has_chapter: bool) -> ScriptureMatch:
    return ScriptureMatch(
        reference=m.group("reference"),
        plain=bool(m.group("plain")),
        ordinal=(m.groupdict().get("ordinal") or "").replace("&nbsp;", "").strip(),
        book=m.group("book"),
        groups=_split_groups(m.group("passages"), m.start("passages"), has_chapter),
        is_link=bool(m.group("link")),
        begin=m.start("reference"),
        end=m.end("reference"),
    )


def _focus(match: ScriptureMatch, caret: int) -> int:
    """Index of the verse token holding the caret, else the nearest one before it."""
    focus = 0
    for i, (_, token) in enumerate(match.tokens):
        if token.begin <= caret <= token.end:
            return i
        if token.begin <= caret:
            focus = i
    return focus


def match_potential_scriptures(text: str, caret: int | None = None, lang: str = "EN") -> list[ScriptureMatch]:
    """
    All citation-shaped substrings of text, left to right and non-overlapping.

    With a caret offset, only the match whose span contains the caret is
    returned (or none), with ``focus`` set to the verse token under the caret.
    """
    general, single = _patterns(check_lang(lang))
    found = [_to_match(m, True) for m in general.finditer(text)]
    found += [_to_match(m, False) for m in single.finditer(text)]
    found.sort(key=lambda r: (r.begin, -r.end))

    results: list[ScriptureMatch] = []
    last_end = -1
    for match in found:
        if match.begin < last_end:
            continue
        last_end = match.end
        if caret is None:
            results.append(match)
        elif match.begin <= caret <= match.end:
            return [dataclasses.replace(match, focus=_focus(match, caret))]
    return results


# ── Book resolution ───────────────────────────────────────────────────────────

def resolve_book(token: str, lang: str = "EN") -> int | None:
    """
    Resolve a book token ("1 Co.", "Gen", "Éph", "psal") to its book number.

    An exact abbreviation always wins. Otherwise the token must be the start
    of the tokens of exactly one book ("psal" -> Psalms); a token that only
    occurs inside another name ("eph" in "zephaniah") never matches.
    Returns None when nothing matches; most matched text is not a reference.
    """
    key = normalize_token(token)
    if len(key) < 2:
        return None
    lex = lexicon(check_lang(lang))
    if key in lex:
        return lex[key]
    owners = {order for abbr, order in lex.items() if abbr.startswith(key)}
    if len(owners) == 1:
        return owners.pop()
    logger.debug("No %s book for %r (%d candidates)", lang, token, len(owners))
    return None
