"""
Tests for the command-line front end (offline commands only).
"""

import io
import json
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from jwl_linker.cli import main


def run(*argv):
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(list(argv))
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_validate(self):
        code, out, _ = run("validate", "Gen 2:6")
        self.assertEqual(code, 0)
        self.assertIn("Gen 2:6 -> Genesis 2:6", out)
        self.assertIn("01002006", out)

    def test_validate_invalid(self):
        code, out, _ = run("validate", "Genesis 2:999")
        self.assertEqual(code, 1)
        self.assertIn("not a valid scripture reference", out)

    def test_validate_unknown_book(self):
        code, _, err = run("validate", "Foo 1:1")
        self.assertEqual(code, 1)
        self.assertIn("unknown book", err)

    def test_link_file(self):
        path = self.dir / "notes.md"
        path.write_text("Read Gen 2:6.\n", encoding="utf-8")
        code, out, _ = run("link", str(path))
        self.assertEqual(code, 0)
        self.assertEqual(out, "Read [Genesis 2:6](jwlibrary:///finder?bible=01002006).\n")

    def test_link_plain_with_settings(self):
        path = self.dir / "notes.md"
        path.write_text("Ps 23:1,2\n", encoding="utf-8")
        settings = self.dir / "settings.json"
        settings.write_text(json.dumps({"space_after_punct": False}), encoding="utf-8")
        code, out, _ = run("--settings", str(settings), "link", "--display", "plain", str(path))
        self.assertEqual(code, 0)
        self.assertEqual(out, "Psalms 23:1,2\n")

    def test_link_reports_invalid(self):
        path = self.dir / "notes.md"
        path.write_text("Gen 51:1\n", encoding="utf-8")
        code, out, err = run("link", str(path))
        self.assertEqual(code, 1)
        self.assertEqual(out, "Gen 51:1\n")
        self.assertIn("⚠️", err)

    def test_convert(self):
        path = self.dir / "links.md"
        path.write_text("https://wol.jw.org/en/wol/d/r1/lp-e/2023401#h=12\n", encoding="utf-8")
        code, out, _ = run("convert", str(path))
        self.assertEqual(code, 0)
        self.assertEqual(out, "jwlibrary:///finder?&docid=2023401&par=12\n")

    def test_language_option(self):
        code, out, _ = run("--lang", "FR", "validate", "Jean 3:16")
        self.assertEqual(code, 0)
        self.assertIn("Jean 3:16 -> Jean 3:16", out)

    def test_validate_marks_passage_at_caret(self):
        code, out, _ = run("validate", "--caret", "9", "Gen 1:1, 3")
        self.assertEqual(code, 0)
        lines = out.splitlines()
        self.assertEqual(lines[0], "Gen 1:1, 3 -> Genesis 1:1, 3")
        self.assertTrue(lines[1].startswith("  Genesis 1:1"))
        self.assertTrue(lines[2].startswith("> 3"))

    def test_decode_ids_and_links(self):
        code, out, _ = run(
            "decode", "01002006", "19023001-19023003",
            "jwlibrary:///finder?bible=43003016", "https://www.jw.org/finder?bible=01001001-01002003",
        )
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), [
            "01002006 -> Genesis 2:6",
            "19023001-19023003 -> Psalms 23:1-3",
            "jwlibrary:///finder?bible=43003016 -> John 3:16",
            "https://www.jw.org/finder?bible=01001001-01002003 -> Genesis 1:1-2:3",
        ])

    def test_decode_bad_input(self):
        code, _, err = run("decode", "hello", "jwlibrary:///finder?docid=1", "99001001")
        self.assertEqual(code, 1)
        self.assertIn("Not a verse id", err)
        self.assertIn("no bible= parameter", err)
        self.assertIn("Unknown book number", err)

    def test_bad_language(self):
        code, _, err = run("--lang", "XX", "validate", "Gen 1:1")
        self.assertEqual(code, 2)
        self.assertIn("ERROR", err)


if __name__ == "__main__":
    unittest.main()
