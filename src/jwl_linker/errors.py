"""
Exceptions and result codes.

Dataset lookups raise the exceptions below. Operations that transform a
piece of user text never raise for bad input; they return a Result whose
``error`` tells the caller what to report.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ScriptureError(Exception):
    """Base class for all jwl_linker errors."""


class UnknownBook(ScriptureError):
    """Raised when a book number is outside the 66-book canon."""

    def __init__(self, book: int):
        self.book = book
        super().__init__(f"Unknown book number: {book!r} (expected 1-66)")


class UnknownChapter(ScriptureError):
    """Raised when a book has no verse count for the requested chapter."""

    def __init__(self, book: int, chapter: int):
        self.book = book
        self.chapter = chapter
        super().__init__(f"Book {book} has no chapter {chapter!r}")


class InvalidUrl(ScriptureError):
    """Raised when a retrieval URL is not a well-formed http(s) URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Not a valid url: {url!r}")


class LookupFailed(ScriptureError):
    """Raised when a page could not be fetched or had no usable content."""

    def __init__(self, url: str, reason: str | None = None):
        self.url = url
        self.reason = reason or "no usable content"
        super().__init__(f"Lookup failed for {url}: {self.reason}")


class ResultError(Enum):
    NONE = "none"
    INVALID_SCRIPTURE = "invalidScripture"
    INVALID_URL = "invalidUrl"
    ONLINE_LOOKUP_FAILED = "onlineLookupFailed"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    def __bool__(self) -> bool:
        return self is not ResultError.NONE


_MESSAGES = {
    ResultError.NONE: "",
    ResultError.INVALID_SCRIPTURE: "⚠️ The reference is not a valid scripture reference.",
    ResultError.INVALID_URL: "⚠️ The reference is not a valid wol.jw.org url.",
    ResultError.ONLINE_LOOKUP_FAILED: "⚠️ Online scripture lookup failed. Try again.",
}


@dataclass(frozen=True)
class Result:
    """Outcome of a text transformation: the new text, whether it changed, and any error."""
    result: str
    changed: bool = False
    error: ResultError = ResultError.NONE
