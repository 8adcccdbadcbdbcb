"""
Tests for scripture and paragraph citations.

The network is never touched: a stub fetcher serves canned jw.org and
wol.jw.org pages and records the urls it was asked for.
"""

import os
import sys
import unittest

import requests
from bs4 import BeautifulSoup

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from jwl_linker.citations import CiteType, add_bible_citation, add_paragraph_citation
from jwl_linker.config import Settings
from jwl_linker.errors import InvalidUrl, LookupFailed, ResultError
from jwl_linker.scraper import PageFetcher, TargetType, extract_plain_text, first_x_words, is_valid_url


# ============================================================================
# FIXTURES
# ============================================================================

PSALM_23 = """
<html><head><title>Psalm 23 | Bible</title></head><body>
<span id="v19023001" class="v"><span class="chapterNum">23 </span>Jehovah is my Shepherd.  I will lack nothing.</span>
<span id="v19023002" class="v"><span class="style-l"></span>2 He makes me lie down in grassy pastures;+ He leads me</span>
<span id="v19023003" class="v">3 He refreshes me.*</span>
<span id="v19023005" class="v">5 You prepare a table before me</span>
</body></html>
"""

GENESIS_2 = """
<html><body>
<span id="v1002006" class="v">6 But a mist would go up from the earth</span>
</body></html>
"""

WOL_PAGE = """
<html><head><title>Keep On the Watch! — WATCHTOWER ONLINE LIBRARY</title></head><body>
<div id="publicationNavigation">The Watchtower\t2023</div>
<p id="p12">12 Stay awake spiritually. Jesus urged his followers to keep on the watch.</p>
</body></html>
"""

WOL_URL = "https://wol.jw.org/en/wol/d/r1/lp-e/2023401#h=12"


class StubFetcher:
    def __init__(self, html):
        self.html = html
        self.urls = []

    def get_soup(self, url):
        self.urls.append(url)
        return BeautifulSoup(self.html, "lxml")


class FailingFetcher:
    def __init__(self):
        self.urls = []

    def get_soup(self, url):
        self.urls.append(url)
        raise LookupFailed(url, "HTTP 404")


# ============================================================================
# SCRIPTURE CITATIONS
# ============================================================================

class TestBibleCitation(unittest.TestCase):

    def test_entire_citation(self):
        fetcher = StubFetcher(PSALM_23)
        res = add_bible_citation("Ps 23:1-2", 0, Settings(), CiteType.SCRIPTURE_ENTIRE, fetcher)
        self.assertTrue(res.changed)
        self.assertEqual(res.error, ResultError.NONE)
        self.assertEqual(
            res.result,
            "> [!verse] BIBLE — [Psalms 23:1-2](jwlibrary:///finder?bible=19023001-19023002)\n"
            "> **1** Jehovah is my Shepherd. I will lack nothing.\n"
            "**2** He makes me lie down in grassy pastures; He leads me\n",
        )
        self.assertEqual(
            fetcher.urls,
            ["https://www.jw.org/finder?bible=19023001-19023002&wtlocale=E"],
        )

    def test_inline_verses_joined_with_space(self):
        fetcher = StubFetcher(PSALM_23)
        settings = Settings(bold_verse_no=False, citation_link=False)
        res = add_bible_citation("Ps 23:2-3", 0, settings, CiteType.SCRIPTURE_ENTIRE, fetcher)
        self.assertIn("> 2 He makes me lie down in grassy pastures; He leads me 3 He refreshes me.\n", res.result)
        self.assertIn("BIBLE — Psalms 23:2-3\n", res.result)

    def test_one_fetch_per_chapter(self):
        fetcher = StubFetcher(PSALM_23)
        res = add_bible_citation("Ps 23:1, 5", 0, Settings(), CiteType.SCRIPTURE_ENTIRE, fetcher)
        self.assertTrue(res.changed)
        self.assertEqual(len(fetcher.urls), 1)
        self.assertIn("You prepare a table before me", res.result)

    def test_snippet(self):
        fetcher = StubFetcher(PSALM_23)
        settings = Settings(snippet_length=3, citation_link=False)
        res = add_bible_citation("Ps 23:1", 0, settings, CiteType.SCRIPTURE_SNIPPET, fetcher)
        self.assertEqual(res.result, "Psalms 23:1\u2002“***1** Jehovah is…*”")

    def test_citation_replaces_only_the_reference_at_caret(self):
        fetcher = StubFetcher(GENESIS_2)
        text = "Gen 1:1 then Gen 2:6"
        settings = Settings(scripture_template="{title}: {text}", citation_link=False, bold_verse_no=False)
        res = add_bible_citation(text, 15, settings, CiteType.SCRIPTURE_ENTIRE, fetcher)
        self.assertEqual(res.result, "Gen 1:1 then Genesis 2:6: 6 But a mist would go up from the earth")

    def test_invalid_reference(self):
        fetcher = StubFetcher(PSALM_23)
        res = add_bible_citation("Ps 23:99", 0, Settings(), CiteType.SCRIPTURE_ENTIRE, fetcher)
        self.assertEqual(res.error, ResultError.INVALID_SCRIPTURE)
        self.assertEqual(res.result, "Ps 23:99")
        self.assertEqual(fetcher.urls, [])

    def test_no_reference_at_caret(self):
        res = add_bible_citation("nothing here", 3, Settings(), CiteType.SCRIPTURE_ENTIRE, StubFetcher(""))
        self.assertEqual(res.error, ResultError.INVALID_SCRIPTURE)
        self.assertFalse(res.changed)

    def test_lookup_failed(self):
        res = add_bible_citation("Ps 23:1", 0, Settings(), CiteType.SCRIPTURE_ENTIRE, FailingFetcher())
        self.assertEqual(res.error, ResultError.ONLINE_LOOKUP_FAILED)
        self.assertEqual(res.result, "Ps 23:1")

    def test_missing_verse_text(self):
        res = add_bible_citation("Gen 2:6", 0, Settings(), CiteType.SCRIPTURE_ENTIRE, StubFetcher(PSALM_23))
        self.assertEqual(res.error, ResultError.ONLINE_LOOKUP_FAILED)
        self.assertFalse(res.changed)


# ============================================================================
# PARAGRAPH CITATIONS
# ============================================================================

class TestParagraphCitation(unittest.TestCase):

    def test_entire_paragraph(self):
        fetcher = StubFetcher(WOL_PAGE)
        text = f"- {WOL_URL}"
        res = add_paragraph_citation(text, len(text), Settings(), CiteType.WOL_ENTIRE, fetcher)
        self.assertEqual(
            res.result,
            f"- > [!cite] PAR. — [The Watchtower 2023]({WOL_URL})\n"
            "> **12** Stay awake spiritually. Jesus urged his followers to keep on the watch.\n",
        )
        self.assertEqual(fetcher.urls, [WOL_URL])

    def test_title_only(self):
        text = f"[old title]({WOL_URL})"
        res = add_paragraph_citation(text, 2, Settings(), CiteType.WOL_TITLE, StubFetcher(WOL_PAGE))
        self.assertEqual(res.result, f"[The Watchtower 2023]({WOL_URL})")

    def test_snippet(self):
        settings = Settings(snippet_length=2)
        res = add_paragraph_citation(WOL_URL, 0, settings, CiteType.WOL_SNIPPET, StubFetcher(WOL_PAGE))
        self.assertEqual(res.result, f"[The Watchtower 2023]({WOL_URL})\u2002“*12 Stay…*”")

    def test_page_title_when_no_navigation(self):
        page = WOL_PAGE.replace('<div id="publicationNavigation">The Watchtower\t2023</div>', "")
        res = add_paragraph_citation(WOL_URL, 0, Settings(), CiteType.WOL_TITLE, StubFetcher(page))
        self.assertEqual(res.result, f"[Keep On the Watch! — WATCHTOWER ONLINE LIBRARY]({WOL_URL})")

    def test_no_link_is_invalid_url(self):
        fetcher = StubFetcher(WOL_PAGE)
        res = add_paragraph_citation("no link here", 0, Settings(), CiteType.WOL_ENTIRE, fetcher)
        self.assertEqual(res.error, ResultError.INVALID_URL)
        self.assertEqual(fetcher.urls, [])

    def test_lookup_failed(self):
        res = add_paragraph_citation(WOL_URL, 0, Settings(), CiteType.WOL_ENTIRE, FailingFetcher())
        self.assertEqual(res.error, ResultError.ONLINE_LOOKUP_FAILED)
        self.assertEqual(res.result, WOL_URL)

    def test_missing_paragraph_is_lookup_failed(self):
        url = WOL_URL.replace("#h=12", "#h=99")
        res = add_paragraph_citation(url, 0, Settings(), CiteType.WOL_ENTIRE, StubFetcher(WOL_PAGE))
        self.assertEqual(res.error, ResultError.ONLINE_LOOKUP_FAILED)
        self.assertFalse(res.changed)
        self.assertEqual(res.result, url)

    def test_dotted_paragraph_id_is_lookup_failed(self):
        url = WOL_URL.replace("#h=12", "#h=1.2")
        res = add_paragraph_citation(url, 0, Settings(), CiteType.WOL_ENTIRE, StubFetcher(WOL_PAGE))
        self.assertEqual(res.error, ResultError.ONLINE_LOOKUP_FAILED)
        self.assertEqual(res.result, url)

    def test_dotted_paragraph_id_found_by_id(self):
        page = WOL_PAGE.replace('id="p12"', 'id="p1.2"')
        url = WOL_URL.replace("#h=12", "#h=1.2")
        res = add_paragraph_citation(url, 0, Settings(), CiteType.WOL_SNIPPET, StubFetcher(page))
        self.assertEqual(res.error, ResultError.NONE)
        self.assertIn("12 Stay", res.result)


# ============================================================================
# SCRAPER HELPERS
# ============================================================================

class TestExtractPlainText(unittest.TestCase):

    def test_scripture_cleanup(self):
        html = '4 Love is patient+ and kind.Love is not jealous.*<span class="newblock"></span>It does not brag,#'
        self.assertEqual(
            extract_plain_text(html, TargetType.SCRIPTURE),
            "4 Love is patient and kind. Love is not jealous.\nIt does not brag,",
        )

    def test_hard_spaces(self):
        self.assertEqual(extract_plain_text("a&nbsp;&nbsp;b"), "a b")

    def test_navigation_on_one_line(self):
        self.assertEqual(extract_plain_text("The\tWatchtower\n2023", TargetType.PUBNAV), "The Watchtower 2023")

    def test_empty(self):
        self.assertEqual(extract_plain_text(""), "")


class TestFirstXWords(unittest.TestCase):

    def test_truncates(self):
        self.assertEqual(first_x_words("one two three four", 2), "one two…")

    def test_short_text_unchanged(self):
        self.assertEqual(first_x_words("one two", 2), "one two")


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        if self.error:
            raise self.error
        return self.response

    def close(self):
        pass


class TestPageFetcher(unittest.TestCase):

    def test_valid_url(self):
        self.assertTrue(is_valid_url(WOL_URL))
        self.assertFalse(is_valid_url("wol.jw.org/en"))
        self.assertFalse(is_valid_url(""))
        self.assertFalse(is_valid_url("ftp://example.com"))

    def test_returns_soup(self):
        session = FakeSession(FakeResponse(200, WOL_PAGE))
        soup = PageFetcher(session).get_soup(WOL_URL)
        self.assertEqual(soup.select_one("#p12").get_text()[:2], "12")
        self.assertIn("User-Agent", session.headers)

    def test_http_error(self):
        fetcher = PageFetcher(FakeSession(FakeResponse(404)))
        with self.assertRaises(LookupFailed):
            fetcher.get_soup(WOL_URL)

    def test_transport_error(self):
        fetcher = PageFetcher(FakeSession(error=requests.ConnectionError("down")))
        with self.assertRaises(LookupFailed):
            fetcher.get_soup(WOL_URL)

    def test_invalid_url_not_requested(self):
        session = FakeSession(FakeResponse(200))
        with PageFetcher(session) as fetcher:
            with self.assertRaises(InvalidUrl):
                fetcher.get_soup("not a url")
        self.assertEqual(session.calls, [])


if __name__ == "__main__":
    unittest.main()
