"""Find, validate and link scripture references for JW Library."""
from .config import DEFAULT_SETTINGS, Settings, load_settings
from .errors import (
    InvalidUrl,
    LookupFailed,
    Result,
    ResultError,
    ScriptureError,
    UnknownBook,
    UnknownChapter,
)
from .linker import add_bible_links, convert_to_library_urls, link_from_caret
from .parser import match_potential_scriptures, resolve_book
from .passages import DisplayType, Passage, Reference, validate_scripture

__version__ = "1.0.0"
