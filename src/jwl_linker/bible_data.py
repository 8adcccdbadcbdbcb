"""
Canonical Bible book data: the 66-book canon, per language.

Each language table holds one entry per book:
  order   - canonical ordering 1-66, also the book number used in verse ids
  name    - display name in that language
  abbrevs - accepted abbreviation tokens, lowercase, without dots or spaces.
            Numbered books are written with the ordinal glued to the name
            ("1cor", "2john"), which is how the resolver normalises input.

The full name (normalised the same way) is always accepted as well, so it
does not need to be repeated in abbrevs. Tokens must be unique within a
language: a token belongs to exactly one book.

Chapter and verse counts are language independent and live in verse_counts.
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from functools import lru_cache

from .errors import UnknownBook, UnknownChapter
from .verse_counts import VERSE_COUNTS

BOOK_COUNT = 66

# Locale code used by jw.org for each supported language
LOCALES: dict[str, str] = {"EN": "E", "FR": "F"}

BOOKS: dict[str, list[dict]] = {
    "EN": [
        # ── Hebrew-Aramaic Scriptures ───────────────────────────────────────
        {"order":  1, "name": "Genesis",          "abbrevs": ["ge", "gen", "gn"]},
        {"order":  2, "name": "Exodus",           "abbrevs": ["ex", "exod", "exo"]},
        {"order":  3, "name": "Leviticus",        "abbrevs": ["le", "lev", "lv"]},
        {"order":  4, "name": "Numbers",          "abbrevs": ["nu", "num", "numb"]},
        {"order":  5, "name": "Deuteronomy",      "abbrevs": ["de", "deut", "deu", "dt"]},
        {"order":  6, "name": "Joshua",           "abbrevs": ["jos", "josh"]},
        {"order":  7, "name": "Judges",           "abbrevs": ["jg", "judg", "jdg"]},
        {"order":  8, "name": "Ruth",             "abbrevs": ["ru", "rth"]},
        {"order":  9, "name": "1 Samuel",         "abbrevs": ["1sa", "1sam"]},
        {"order": 10, "name": "2 Samuel",         "abbrevs": ["2sa", "2sam"]},
        {"order": 11, "name": "1 Kings",          "abbrevs": ["1ki", "1kg", "1kgs"]},
        {"order": 12, "name": "2 Kings",          "abbrevs": ["2ki", "2kg", "2kgs"]},
        {"order": 13, "name": "1 Chronicles",     "abbrevs": ["1ch", "1chr", "1chron"]},
        {"order": 14, "name": "2 Chronicles",     "abbrevs": ["2ch", "2chr", "2chron"]},
        {"order": 15, "name": "Ezra",             "abbrevs": ["ezr"]},
        {"order": 16, "name": "Nehemiah",         "abbrevs": ["ne", "nem", "neh"]},
        {"order": 17, "name": "Esther",           "abbrevs": ["es", "est", "esth"]},
        {"order": 18, "name": "Job",              "abbrevs": ["jb"]},
        {"order": 19, "name": "Psalms",           "abbrevs": ["ps", "psa", "psalm", "pss"]},
        {"order": 20, "name": "Proverbs",         "abbrevs": ["pr", "pro", "prov", "prv"]},
        {"order": 21, "name": "Ecclesiastes",     "abbrevs": ["ec", "ecc", "eccl", "eccles", "qoh"]},
        {"order": 22, "name": "Song of Solomon",  "abbrevs": ["canticles", "ca", "sos", "sng", "song"]},
        {"order": 23, "name": "Isaiah",           "abbrevs": ["isa"]},
        {"order": 24, "name": "Jeremiah",         "abbrevs": ["jer", "jr"]},
        {"order": 25, "name": "Lamentations",     "abbrevs": ["la", "lam"]},
        {"order": 26, "name": "Ezekiel",          "abbrevs": ["eze", "ezek", "ezk"]},
        {"order": 27, "name": "Daniel",           "abbrevs": ["da", "dan", "dn"]},
        {"order": 28, "name": "Hosea",            "abbrevs": ["ho", "hos"]},
        {"order": 29, "name": "Joel",             "abbrevs": ["joe"]},
        {"order": 30, "name": "Amos",             "abbrevs": ["am", "amo"]},
        {"order": 31, "name": "Obadiah",          "abbrevs": ["ob", "oba", "obad"]},
        {"order": 32, "name": "Jonah",            "abbrevs": ["jon", "jnh"]},
        {"order": 33, "name": "Micah",            "abbrevs": ["mic"]},
        {"order": 34, "name": "Nahum",            "abbrevs": ["na", "nah"]},
        {"order": 35, "name": "Habakkuk",         "abbrevs": ["hab"]},
        {"order": 36, "name": "Zephaniah",        "abbrevs": ["zep", "zeph"]},
        {"order": 37, "name": "Haggai",           "abbrevs": ["hag"]},
        {"order": 38, "name": "Zechariah",        "abbrevs": ["zec", "zech"]},
        {"order": 39, "name": "Malachi",          "abbrevs": ["mal"]},

        # ── Christian Greek Scriptures ──────────────────────────────────────
        {"order": 40, "name": "Matthew",          "abbrevs": ["mt", "mat", "matt"]},
        {"order": 41, "name": "Mark",             "abbrevs": ["mr", "mk", "mrk"]},
        {"order": 42, "name": "Luke",             "abbrevs": ["lu", "lk", "luk"]},
        {"order": 43, "name": "John",             "abbrevs": ["joh", "jn", "jhn"]},
        {"order": 44, "name": "Acts",             "abbrevs": ["ac", "act"]},
        {"order": 45, "name": "Romans",           "abbrevs": ["ro", "rom", "rm"]},
        {"order": 46, "name": "1 Corinthians",    "abbrevs": ["1co", "1cor"]},
        {"order": 47, "name": "2 Corinthians",    "abbrevs": ["2co", "2cor"]},
        {"order": 48, "name": "Galatians",        "abbrevs": ["ga", "gal"]},
        {"order": 49, "name": "Ephesians",        "abbrevs": ["eph", "ephes"]},
        {"order": 50, "name": "Philippians",      "abbrevs": ["ph", "php", "phil"]},
        {"order": 51, "name": "Colossians",       "abbrevs": ["col"]},
        {"order": 52, "name": "1 Thessalonians",  "abbrevs": ["1th", "1thes", "1thess"]},
        {"order": 53, "name": "2 Thessalonians",  "abbrevs": ["2th", "2thes", "2thess"]},
        {"order": 54, "name": "1 Timothy",        "abbrevs": ["1ti", "1tim"]},
        {"order": 55, "name": "2 Timothy",        "abbrevs": ["2ti", "2tim"]},
        {"order": 56, "name": "Titus",            "abbrevs": ["ti", "tit"]},
        {"order": 57, "name": "Philemon",         "abbrevs": ["phm", "phlm", "philem"]},
        {"order": 58, "name": "Hebrews",          "abbrevs": ["heb"]},
        {"order": 59, "name": "James",            "abbrevs": ["jas", "jm"]},
        {"order": 60, "name": "1 Peter",          "abbrevs": ["1pe", "1pet", "1pt"]},
        {"order": 61, "name": "2 Peter",          "abbrevs": ["2pe", "2pet", "2pt"]},
        {"order": 62, "name": "1 John",           "abbrevs": ["1jo", "1joh", "1jn"]},
        {"order": 63, "name": "2 John",           "abbrevs": ["2jo", "2joh", "2jn"]},
        {"order": 64, "name": "3 John",           "abbrevs": ["3jo", "3joh", "3jn"]},
        {"order": 65, "name": "Jude",             "abbrevs": ["jud"]},
        {"order": 66, "name": "Revelation",       "abbrevs": ["re", "rev"]},
    ],
    "FR": [
        # ── Écritures hébraïques et araméennes ──────────────────────────────
        {"order":  1, "name": "Genèse",           "abbrevs": ["gen", "ge"]},
        {"order":  2, "name": "Exode",            "abbrevs": ["exo", "ex"]},
        {"order":  3, "name": "Lévitique",        "abbrevs": ["lev", "le"]},
        {"order":  4, "name": "Nombres",          "abbrevs": ["nom"]},
        {"order":  5, "name": "Deutéronome",      "abbrevs": ["de", "deu", "deut"]},
        {"order":  6, "name": "Josué",            "abbrevs": ["jos"]},
        {"order":  7, "name": "Juges",            "abbrevs": ["jug"]},
        {"order":  8, "name": "Ruth",             "abbrevs": ["ru"]},
        {"order":  9, "name": "1 Samuel",         "abbrevs": ["1sam", "1sa"]},
        {"order": 10, "name": "2 Samuel",         "abbrevs": ["2sam", "2sa"]},
        {"order": 11, "name": "1 Rois",           "abbrevs": ["1ro"]},
        {"order": 12, "name": "2 Rois",           "abbrevs": ["2ro"]},
        {"order": 13, "name": "1 Chroniques",     "abbrevs": ["1chr", "1ch"]},
        {"order": 14, "name": "2 Chroniques",     "abbrevs": ["2chr", "2ch"]},
        {"order": 15, "name": "Esdras",           "abbrevs": ["esd"]},
        {"order": 16, "name": "Néhémie",          "abbrevs": ["neh"]},
        {"order": 17, "name": "Esther",           "abbrevs": ["est"]},
        {"order": 18, "name": "Job",              "abbrevs": []},
        {"order": 19, "name": "Psaumes",          "abbrevs": ["psa", "ps"]},
        {"order": 20, "name": "Proverbes",        "abbrevs": ["pr", "pro", "prov"]},
        {"order": 21, "name": "Ecclésiaste",      "abbrevs": ["ec", "ecc", "eccl"]},
        {"order": 22, "name": "Chant de Salomon", "abbrevs": ["chant"]},
        {"order": 23, "name": "Isaïe",            "abbrevs": ["isa", "is"]},
        {"order": 24, "name": "Jérémie",          "abbrevs": ["jer"]},
        {"order": 25, "name": "Lamentations",     "abbrevs": ["lam", "la"]},
        {"order": 26, "name": "Ézéchiel",         "abbrevs": ["eze", "ez"]},
        {"order": 27, "name": "Daniel",           "abbrevs": ["dan", "da"]},
        {"order": 28, "name": "Osée",             "abbrevs": ["os"]},
        {"order": 29, "name": "Joël",             "abbrevs": []},
        {"order": 30, "name": "Amos",             "abbrevs": []},
        {"order": 31, "name": "Abdias",           "abbrevs": ["abd", "ab"]},
        {"order": 32, "name": "Jonas",            "abbrevs": []},
        {"order": 33, "name": "Michée",           "abbrevs": ["mic"]},
        {"order": 34, "name": "Nahum",            "abbrevs": []},
        {"order": 35, "name": "Habacuc",          "abbrevs": ["hab"]},
        {"order": 36, "name": "Sophonie",         "abbrevs": ["sph", "sop"]},
        {"order": 37, "name": "Aggée",            "abbrevs": ["agg", "ag"]},
        {"order": 38, "name": "Zacharie",         "abbrevs": ["zac"]},
        {"order": 39, "name": "Malachie",         "abbrevs": ["mal"]},

        # ── Écritures grecques chrétiennes ──────────────────────────────────
        {"order": 40, "name": "Matthieu",         "abbrevs": ["mt", "mat", "matt"]},
        {"order": 41, "name": "Marc",             "abbrevs": []},
        {"order": 42, "name": "Luc",              "abbrevs": []},
        {"order": 43, "name": "Jean",             "abbrevs": []},
        {"order": 44, "name": "Actes",            "abbrevs": ["ac"]},
        {"order": 45, "name": "Romains",          "abbrevs": ["rom", "ro"]},
        {"order": 46, "name": "1 Corinthiens",    "abbrevs": ["1cor", "1co"]},
        {"order": 47, "name": "2 Corinthiens",    "abbrevs": ["2cor", "2co"]},
        {"order": 48, "name": "Galates",          "abbrevs": ["gal", "ga"]},
        {"order": 49, "name": "Éphésiens",        "abbrevs": ["eph"]},
        {"order": 50, "name": "Philippiens",      "abbrevs": ["ph", "phil"]},
        {"order": 51, "name": "Colossiens",       "abbrevs": ["col"]},
        {"order": 52, "name": "1 Thessaloniciens", "abbrevs": ["1th"]},
        {"order": 53, "name": "2 Thessaloniciens", "abbrevs": ["2th"]},
        {"order": 54, "name": "1 Timothée",       "abbrevs": ["1tim", "1ti"]},
        {"order": 55, "name": "2 Timothée",       "abbrevs": ["2tim", "2ti"]},
        {"order": 56, "name": "Tite",             "abbrevs": []},
        {"order": 57, "name": "Philémon",         "abbrevs": ["phm"]},
        {"order": 58, "name": "Hébreux",          "abbrevs": ["heb", "he"]},
        {"order": 59, "name": "Jacques",          "abbrevs": ["jac"]},
        {"order": 60, "name": "1 Pierre",         "abbrevs": ["1pi"]},
        {"order": 61, "name": "2 Pierre",         "abbrevs": ["2pi"]},
        {"order": 62, "name": "1 Jean",           "abbrevs": ["1je"]},
        {"order": 63, "name": "2 Jean",           "abbrevs": ["2je"]},
        {"order": 64, "name": "3 Jean",           "abbrevs": ["3je"]},
        {"order": 65, "name": "Jude",             "abbrevs": []},
        {"order": 66, "name": "Révélation",       "abbrevs": ["rev", "re"]},
    ],
}


@dataclass(frozen=True)
class Book:
    order: int
    name: str
    abbrevs: frozenset[str]
    chapters: int

    @property
    def has_chapters(self) -> bool:
        """False for the single-chapter books, which are cited by verse alone."""
        return self.chapters > 1


def strip_diacritics(s: str) -> str:
    n = unicodedata.normalize("NFD", s)
    return "".join(ch for ch in n if unicodedata.category(ch) != "Mn")


def normalize_token(s: str) -> str:
    """
    Lowercase, drop dots, whitespace and accents: "1 Co." -> "1co",
    "Éph" -> "eph", "Song of Solomon" -> "songofsolomon".
    """
    s = s.replace("&nbsp;", "").replace(".", "")
    s = "".join(s.split())
    return strip_diacritics(s).lower()


def _build_catalog(lang: str, table: list[dict]) -> tuple[Book, ...]:
    orders = [entry["order"] for entry in table]
    if orders != list(range(1, BOOK_COUNT + 1)):
        raise ValueError(f"Book table {lang} is not ordered 1-{BOOK_COUNT}")

    books: list[Book] = []
    owner: dict[str, int] = {}
    for entry in table:
        tokens = {normalize_token(a) for a in entry["abbrevs"]}
        tokens.add(normalize_token(entry["name"]))
        for token in tokens:
            if token in owner:
                raise ValueError(
                    f"Abbreviation {token!r} in {lang} belongs to books "
                    f"{owner[token]} and {entry['order']}"
                )
            owner[token] = entry["order"]
        books.append(Book(
            order=entry["order"],
            name=entry["name"],
            abbrevs=frozenset(tokens),
            chapters=len(VERSE_COUNTS[entry["order"]]),
        ))
    return tuple(books)


# ── Lookup structures ─────────────────────────────────────────────────────────

CATALOG: dict[str, tuple[Book, ...]] = {
    lang: _build_catalog(lang, table) for lang, table in BOOKS.items()
}


def languages() -> list[str]:
    return list(CATALOG)


def check_lang(lang: str) -> str:
    if lang not in CATALOG:
        raise ValueError(f"Unsupported language {lang!r}; expected one of {', '.join(CATALOG)}")
    return lang


def books(lang: str = "EN") -> tuple[Book, ...]:
    return CATALOG[check_lang(lang)]


def get_book(order: int, lang: str = "EN") -> Book:
    if not isinstance(order, int) or not 1 <= order <= BOOK_COUNT:
        raise UnknownBook(order)
    return books(lang)[order - 1]


def book_name(order: int, lang: str = "EN") -> str:
    return get_book(order, lang).name


def chapter_count(order: int) -> int:
    if order not in VERSE_COUNTS:
        raise UnknownBook(order)
    return len(VERSE_COUNTS[order])


def max_verse(order: int, chapter: int) -> int:
    """Highest verse number of a chapter. Raises UnknownBook / UnknownChapter."""
    if not 1 <= chapter <= chapter_count(order):
        raise UnknownChapter(order, chapter)
    return VERSE_COUNTS[order][chapter - 1]


def abbreviation_tokens(lang: str, order: int) -> frozenset[str]:
    return get_book(order, lang).abbrevs


@lru_cache(maxsize=None)
def lexicon(lang: str) -> dict[str, int]:
    """Normalised token -> book number for one language."""
    return {token: book.order for book in books(lang) for token in book.abbrevs}


def single_chapter_books(lang: str = "EN") -> list[Book]:
    return [b for b in books(lang) if not b.has_chapters]


if __name__ == "__main__":
    for _lang in languages():
        print(f"{_lang}: {len(books(_lang))} books, {len(lexicon(_lang))} tokens")
    print(f"Chapters: {sum(chapter_count(b) for b in range(1, BOOK_COUNT + 1))}")
    assert lexicon("EN")["rom"] == 45
    assert lexicon("EN")["1co"] == 46
    assert lexicon("FR")["eph"] == 49
    assert max_verse(1, 2) == 25
    assert [b.name for b in single_chapter_books()] == [
        "Obadiah", "Philemon", "2 John", "3 John", "Jude"]
    print("All assertions passed.")
