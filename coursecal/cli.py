"""
CLI (Command Line Interface).

Turn a course description (TOML) into calendar output:

    coursecal text  <course.toml>
    coursecal table <course.toml>
    coursecal ics   <course.toml> <out.ics>

Every command loads the course, expands recurring sessions and works on the
ordered event list. `--code` overrides the course code used as title prefix.
"""

from __future__ import annotations

import argparse
import logging
import sys

from coursecal.errors import CourseError
from coursecal.events import Event, course_events
from coursecal.export_ics import export_events_to_ics
from coursecal.load import load_course
from coursecal.model import Course
from coursecal.render import print_table, render_text

logger = logging.getLogger(__name__)

_handler: logging.Handler | None = None


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger: messages go to stderr, DEBUG with --verbose.

    Only the handler installed by a previous call is replaced; handlers set up
    by a host application stay in place.
    """
    global _handler

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(_handler)


def _load(args: argparse.Namespace) -> tuple[Course, list[Event], str | None]:
    course = load_course(args.course)
    events = course_events(course)
    code = args.code if args.code else course.code
    logger.debug("Loaded %s: %d events", args.course, len(events))
    return course, events, code


def _cmd_text(args: argparse.Namespace) -> int:
    """
    Print every event as a plain text block.
    """
    _, events, code = _load(args)
    sys.stdout.write(render_text(events, code=code))
    return 0


def _cmd_table(args: argparse.Namespace) -> int:
    """
    Print an overview table of all events.
    """
    course, events, code = _load(args)
    if not events:
        print("No events.")
        return 0
    print_table(events, code=code, title=course.name)
    return 0


def _cmd_ics(args: argparse.Namespace) -> int:
    """
    Export all events into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    _, events, code = _load(args)
    n = export_events_to_ics(events, out_path, code=code)
    print(f"Exported {n} events to: {out_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="coursecal", description="Course schedule to calendar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("course", type=str, help="Course description (e.g. course.toml)")
        p.add_argument("--code", type=str, default=None, help="Course code used as title prefix")

    p_text = sub.add_parser("text", help="Print events as plain text")
    add_common(p_text)

    p_table = sub.add_parser("table", help="Print events as a table")
    add_common(p_table)

    p_ics = sub.add_parser("ics", help="Export events to .ics")
    add_common(p_ics)
    p_ics.add_argument("out", type=str, help="Output file path (e.g. out.ics)")

    return parser


COMMANDS = {
    "text": _cmd_text,
    "table": _cmd_table,
    "ics": _cmd_ics,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        raise SystemExit(handler(args))
    except CourseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
