"""
Settings and fixed URL constants.

Settings is an immutable value passed explicitly to every operation that
needs it (language table, display spacing, citation templates). A JSON
settings file can override any of the defaults:

  {"lang": "FR", "space_after_punct": false, "snippet_length": 12}
"""
from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .bible_data import check_lang

logger = logging.getLogger(__name__)

JWL_FINDER = "jwlibrary:///finder?"
WOL_ROOT = "https://wol.jw.org"
WEB_FINDER = "https://www.jw.org/finder?"
URL_PARAM = "bible="

# Language display name → table code
LANGUAGES: dict[str, str] = {
    "English": "EN",
    "French": "FR",
}


def normalize_lang(lang: str) -> str:
    code = LANGUAGES.get(lang.strip().title(), lang.strip().upper())
    return check_lang(code)


@dataclass(frozen=True)
class Settings:
    lang: str = "EN"
    space_after_punct: bool = True
    scripture_template: str = "> [!verse] BIBLE — {title}\n> {text}\n"
    paragraph_template: str = "> [!cite] PAR. — {title}\n> {text}\n"
    snippet_template: str = "{title}\u2002“*{text}*”"
    snippet_length: int = 20
    bold_verse_no: bool = True
    citation_link: bool = True

    def __post_init__(self):
        object.__setattr__(self, "lang", normalize_lang(self.lang))
        object.__setattr__(self, "snippet_length", max(1, min(100, int(self.snippet_length))))

    def replace(self, **changes) -> Settings:
        return dataclasses.replace(self, **changes)

    @property
    def comma(self) -> str:
        return ", " if self.space_after_punct else ","

    @property
    def semicolon(self) -> str:
        return "; " if self.space_after_punct else ";"

    @classmethod
    def from_dict(cls, data: dict) -> Settings:
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})


DEFAULT_SETTINGS = Settings()


def load_settings(path: Path | None = None) -> Settings:
    """Overlay a JSON settings file on the defaults. A missing file gives the defaults."""
    if path is None or not path.exists():
        if path is not None:
            logger.debug("Settings file %s not found, using defaults", path)
        return DEFAULT_SETTINGS
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    logger.debug("Loaded settings from %s", path)
    return Settings.from_dict(data)
