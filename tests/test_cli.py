"""
Tests for the CLI entry point.

These tests run the commands against tests/data/course.toml and check:
- exit codes (0 on success, 1 on course errors, 2 on usage errors)
- the printed listing / written calendar
"""

import contextlib
import io
import logging
import tempfile
import unittest
from pathlib import Path

import coursecal.cli as cli
from coursecal.cli import main

DATA = Path(__file__).resolve().parent / "data" / "course.toml"

BAD_WEEK = """
[[week]]
start = 2024-02-19T00:00:00+11:00

[[session]]
kind = "tutorial"
first = 2024-02-20T14:00:00+11:00
duration = 3600
weeks = [0, 5]
"""


def _run(argv: list[str]) -> tuple[int, str, str]:
    out = io.StringIO()
    err = io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        try:
            main(argv)
        except SystemExit as exc:
            return exc.code, out.getvalue(), err.getvalue()
    raise AssertionError("main() did not raise SystemExit")


class TestCLI(unittest.TestCase):
    def test_missing_command_is_usage_error(self) -> None:
        code, _, _ = _run([])
        self.assertEqual(code, 2)

    def test_text_lists_events_in_order(self) -> None:
        code, out, _ = _run(["text", str(DATA)])
        self.assertEqual(code, 0)

        titles = [line for line in out.splitlines() if line.startswith("COMP1000 ")]
        self.assertEqual(
            titles,
            [
                "COMP1000 Welcome (lecture)",
                "COMP1000 (tutorial)",
                "COMP1000 (tutorial)",
                "COMP1000 (tutorial)",
                "COMP1000 Assignment 1: Demo (presentation)",
                "COMP1000 Assignment 1: Final (submission)",
            ],
        )
        self.assertIn("Build a difference engine.", out)
        self.assertIn("Five minute demo.", out)

    def test_code_option_overrides_course_code(self) -> None:
        code, out, _ = _run(["text", str(DATA), "--code", "XYZ9"])
        self.assertEqual(code, 0)
        self.assertIn("XYZ9 Welcome (lecture)", out)
        self.assertNotIn("COMP1000", out)

    def test_ics_export(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            target = Path(d) / "course.ics"
            code, out, _ = _run(["ics", str(DATA), str(target)])
            self.assertEqual(code, 0)
            self.assertIn("Exported 6 events to:", out)

            text = target.read_text(encoding="utf-8")
            self.assertEqual(text.count("BEGIN:VEVENT"), 6)

    def test_keeps_host_logging_handlers(self) -> None:
        root = logging.getLogger()
        host = logging.NullHandler()
        root.addHandler(host)
        try:
            _run(["text", str(DATA)])
            count = len(root.handlers)
            _run(["text", str(DATA)])

            self.assertIn(host, root.handlers)
            self.assertIn(cli._handler, root.handlers)
            # the previous run's handler is replaced, not stacked
            self.assertEqual(len(root.handlers), count)
        finally:
            root.removeHandler(host)

    def test_out_of_range_week_exits_with_error(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            path = Path(d) / "bad.toml"
            path.write_text(BAD_WEEK, encoding="utf-8")

            code, _, err = _run(["text", str(path)])
            self.assertEqual(code, 1)
            self.assertIn("non-existent week 5", err)

    def test_malformed_input_exits_with_error(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            path = Path(d) / "bad.toml"
            path.write_text("[[week]]\nstart = 2024-02-19T00:00:00\n", encoding="utf-8")

            code, _, err = _run(["table", str(path)])
            self.assertEqual(code, 1)
            self.assertIn("week[0].start", err)


if __name__ == "__main__":
    unittest.main()
