"""
Tests for the BBCCCVVV verse id codec and url helpers.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from jwl_linker.verse_ids import (
    decode,
    decode_range,
    encode,
    finder_verse_id,
    library_url,
    verse_element_ids,
    web_url,
    wol_params,
)


class TestEncode(unittest.TestCase):

    def test_single_verse(self):
        self.assertEqual(encode(1, 2, 6), "01002006")
        self.assertEqual(encode(66, 22, 21), "66022021")

    def test_range(self):
        self.assertEqual(encode(46, 13, 4, 7), "46013004-46013007")

    def test_range_collapses_when_last_not_after_first(self):
        self.assertEqual(encode(1, 1, 5, 5), "01001005")
        self.assertEqual(encode(1, 1, 5, 3), "01001005")

    def test_out_of_width(self):
        with self.assertRaises(ValueError):
            encode(100, 1, 1)
        with self.assertRaises(ValueError):
            encode(1, 1000, 1)

    def test_round_trip(self):
        for book, chapter, verse in [(1, 1, 1), (19, 119, 176), (65, 1, 25), (66, 22, 21)]:
            self.assertEqual(decode(encode(book, chapter, verse)), (book, chapter, verse))

    def test_decode_range(self):
        self.assertEqual(decode_range("46013004-46013007"), ((46, 13, 4), (46, 13, 7)))
        self.assertEqual(decode_range("01002006"), ((1, 2, 6), (1, 2, 6)))

    def test_decode_malformed(self):
        for bad in ("", "0100200", "abcdefgh", "010020061"):
            with self.assertRaises(ValueError):
                decode(bad)


class TestUrls(unittest.TestCase):

    def test_element_ids_are_not_padded_on_book(self):
        self.assertEqual(verse_element_ids(1, 2, 6, 7), ["1002006", "1002007"])
        self.assertEqual(verse_element_ids(46, 13, 4, 4), ["46013004"])

    def test_library_url(self):
        self.assertEqual(library_url("01002006"), "jwlibrary:///finder?bible=01002006")

    def test_web_url(self):
        self.assertEqual(web_url("01002006"), "https://www.jw.org/finder?bible=01002006")
        self.assertEqual(
            web_url("01002006", "F"),
            "https://www.jw.org/finder?bible=01002006&wtlocale=F",
        )

    def test_finder_verse_id(self):
        self.assertEqual(finder_verse_id("jwlibrary:///finder?bible=46013004-46013007"), "46013004-46013007")
        self.assertIsNone(finder_verse_id("jwlibrary:///finder?&docid=2023401&par=12"))

    def test_wol_params(self):
        url = "https://wol.jw.org/en/wol/d/r1/lp-e/2023401#h=12"
        self.assertEqual(wol_params(url), ("2023401", "12"))
        self.assertEqual(wol_params("https://wol.jw.org/en/wol/d/r1/lp-e/2023401"), ("2023401", ""))


if __name__ == "__main__":
    unittest.main()
