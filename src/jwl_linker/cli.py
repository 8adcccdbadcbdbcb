"""
Command-line front end.

Usage:
  jwl-linker link notes.md                  # link every reference (stdin if no file)
  jwl-linker link --display url page.html   # HTML anchors instead of markdown links
  jwl-linker convert notes.md               # wol.jw.org / jw.org links -> JW Library
  jwl-linker validate "Gen 2:6" "Jude 5"    # show display text and verse ids
  jwl-linker validate --caret 9 "Gen 1:1, 3"  # mark the passage under the caret
  jwl-linker decode 01002006-01002008       # verse ids or finder links -> references
  jwl-linker cite "Ps 23:1-3"               # quote the verses from jw.org
  jwl-linker paragraph "https://wol.jw.org/en/wol/d/r1/lp-e/2023401#h=12" --snippet
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .bible_data import book_name
from .citations import CiteType, add_bible_citation, add_paragraph_citation
from .config import load_settings
from .errors import Result, ScriptureError
from .linker import add_bible_links, convert_to_library_urls
from .parser import match_potential_scriptures
from .passages import DisplayType, validate_scripture
from .verse_ids import decode_range, finder_verse_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def _read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _report(res: Result) -> int:
    print(res.result, end="" if res.result.endswith("\n") else "\n")
    if res.error:
        print(res.error.message, file=sys.stderr)
        return 1
    return 0


def cmd_link(args, settings) -> int:
    return _report(add_bible_links(_read_input(args.file), DisplayType(args.display), settings))


def cmd_convert(args, settings) -> int:
    return _report(convert_to_library_urls(_read_input(args.file)))


def cmd_validate(args, settings) -> int:
    status = 0
    for text in args.references:
        matches = match_potential_scriptures(text, args.caret, settings.lang)
        if not matches:
            print(f"{text}: no reference found", file=sys.stderr)
            status = 1
            continue
        for match in matches:
            ref = validate_scripture(match, settings, DisplayType.CITE)
            if not ref.resolved:
                print(f"{match.reference}: unknown book", file=sys.stderr)
                status = 1
                continue
            print(f"{match.reference} -> {ref.display}")
            focused = ref.focused
            for p in ref.passages:
                mark = ">" if p is focused else " "
                if p.valid:
                    print(f"{mark} {p.display:<30} {p.canonical_id:<18} {p.jwlib}")
                else:
                    print(f"{mark} {p.display:<30} {p.error.message}")
                    status = 1
    return status


def _describe(range_id: str, lang: str) -> str:
    (book, chapter, verse), (last_book, last_chapter, last_verse) = decode_range(range_id)
    text = f"{book_name(book, lang)} {chapter}:{verse}"
    if last_book != book:
        return f"{text} - {book_name(last_book, lang)} {last_chapter}:{last_verse}"
    if last_chapter != chapter:
        return f"{text}-{last_chapter}:{last_verse}"
    if last_verse != verse:
        return f"{text}-{last_verse}"
    return text


def cmd_decode(args, settings) -> int:
    status = 0
    for value in args.ids:
        range_id = finder_verse_id(value) if "?" in value else value
        if range_id is None:
            print(f"{value}: no bible= parameter", file=sys.stderr)
            status = 1
            continue
        try:
            print(f"{value} -> {_describe(range_id, settings.lang)}")
        except (ValueError, ScriptureError) as e:
            print(f"{value}: {e}", file=sys.stderr)
            status = 1
    return status


def cmd_cite(args, settings) -> int:
    caret = args.caret if args.caret is not None else 0
    cite_type = CiteType.SCRIPTURE_SNIPPET if args.snippet else CiteType.SCRIPTURE_ENTIRE
    return _report(add_bible_citation(args.text, caret, settings, cite_type))


def cmd_paragraph(args, settings) -> int:
    caret = args.caret if args.caret is not None else 0
    if args.title:
        cite_type = CiteType.WOL_TITLE
    elif args.snippet:
        cite_type = CiteType.WOL_SNIPPET
    else:
        cite_type = CiteType.WOL_ENTIRE
    return _report(add_paragraph_citation(args.text, caret, settings, cite_type))


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="jwl-linker",
        description="Link and cite scripture references for JW Library",
    )
    ap.add_argument("--settings", metavar="FILE", type=Path, help="JSON settings file")
    ap.add_argument("--lang", metavar="CODE", help="Book name language (EN, FR)")
    ap.add_argument("--no-space", action="store_true", help="No space after , and ; between passages")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("link", help="Link every scripture reference in a text")
    p.add_argument("file", nargs="?", help="Input file (default: stdin)")
    p.add_argument("--display", choices=["md", "url", "plain", "first"], default="md")
    p.set_defaults(func=cmd_link)

    p = sub.add_parser("convert", help="Switch jw.org web links to JW Library links")
    p.add_argument("file", nargs="?", help="Input file (default: stdin)")
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser("validate", help="Show how references resolve")
    p.add_argument("references", nargs="+")
    p.add_argument("--caret", type=int, help="Only the reference at this offset, focused passage marked with >")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("decode", help="Show the references behind verse ids or finder links")
    p.add_argument("ids", nargs="+", metavar="ID")
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser("cite", help="Quote the verses of a reference")
    p.add_argument("text")
    p.add_argument("--caret", type=int, help="Offset of the reference in TEXT (default 0)")
    p.add_argument("--snippet", action="store_true", help="First words only")
    p.set_defaults(func=cmd_cite)

    p = sub.add_parser("paragraph", help="Quote the paragraph of a wol.jw.org link")
    p.add_argument("text")
    p.add_argument("--caret", type=int, help="Offset of the link in TEXT (default 0)")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--snippet", action="store_true", help="First words only")
    group.add_argument("--title", action="store_true", help="Linked title only")
    p.set_defaults(func=cmd_paragraph)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.settings)
        changes = {}
        if args.lang:
            changes["lang"] = args.lang
        if args.no_space:
            changes["space_after_punct"] = False
        if changes:
            settings = settings.replace(**changes)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
