"""
Errors raised while loading or expanding a course.

Everything derives from CourseError so the CLI can report any of them
with a single except clause.
"""

from __future__ import annotations


class CourseError(Exception):
    """Base class for all course related errors."""


class WeekOutOfRange(CourseError):
    """
    A recurring session names a week that the course does not have.
    """

    def __init__(self, kind: str, index: int) -> None:
        self.kind = kind
        self.index = index
        super().__init__(f"Requested repeat of {kind} session in non-existent week {index}")


class MalformedInput(CourseError):
    """
    The course document does not match the expected structure.

    `path` is the dotted key path of the offending value, e.g. "week[1].start".
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
