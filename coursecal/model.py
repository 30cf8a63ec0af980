"""
Central data model definitions used across the project.

This module defines the in-memory shape of one course schedule:
- weeks with their concrete sessions
- recurring sessions that still have to be expanded into weeks
- assignments with submission deadlines and presentations

Ordering:
Event ordering needs a total order over sessions, submissions, presentations
and assignments. Optional fields make the dataclass-generated ordering unusable
(None cannot be compared with str), so every class provides a sort_key()
where a missing value sorts before any present value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, List, Optional, Tuple


def _opt(value: Any) -> Tuple[Any, ...]:
    # None sorts before any present value
    return (0,) if value is None else (1, value)


@dataclass
class Session:
    """
    One concrete scheduled occurrence, e.g. a single lecture or tutorial.
    """

    kind: str
    time: datetime
    duration: timedelta
    title: Optional[str] = None
    location: Optional[str] = None
    presenters: List[str] = field(default_factory=list)

    @property
    def end(self) -> datetime:
        return self.time + self.duration

    def sort_key(self) -> tuple:
        return (
            self.time,
            _opt(self.title),
            _opt(self.location),
            tuple(self.presenters),
            self.kind,
            self.duration,
        )


@dataclass
class Week:
    """
    A dated container of sessions. Weeks are addressed by their position in the course.
    """

    start: datetime
    sessions: List[Session] = field(default_factory=list)


@dataclass
class RecurringSession:
    """
    A session that repeats in several weeks.

    `first` is only used for its distance from the start of the first listed
    week; every generated session keeps that same distance from its own week.
    """

    kind: str
    first: datetime
    duration: timedelta
    weeks: List[int] = field(default_factory=list)
    title: Optional[str] = None
    location: Optional[str] = None
    presenters: List[str] = field(default_factory=list)

    def occurrence(self, reference_start: datetime, week_start: datetime) -> Session:
        """
        Build the concrete session for the week starting at `week_start`.
        """
        offset = self.first - reference_start
        return Session(
            kind=self.kind,
            time=week_start + offset,
            duration=self.duration,
            title=self.title,
            location=self.location,
            presenters=list(self.presenters),
        )


@dataclass
class Submission:
    """A submission deadline for an assignment."""

    name: str
    time: datetime
    description: Optional[str] = None

    def sort_key(self) -> tuple:
        return (self.name, self.time, _opt(self.description))


@dataclass
class Presentation:
    """A presentation held in every session of the given kind in the listed weeks."""

    name: str
    session: str
    weeks: List[int] = field(default_factory=list)
    description: Optional[str] = None

    def sort_key(self) -> tuple:
        return (self.name, self.session, tuple(self.weeks), _opt(self.description))


@dataclass
class Assignment:
    name: str
    link: str
    description: Optional[str] = None
    value: Optional[float] = None
    submissions: List[Submission] = field(default_factory=list)
    presentations: List[Presentation] = field(default_factory=list)

    def sort_key(self) -> tuple:
        return (
            self.name,
            _opt(self.description),
            self.link,
            _opt(self.value),
            tuple(s.sort_key() for s in self.submissions),
            tuple(p.sort_key() for p in self.presentations),
        )


@dataclass
class Course:
    """
    Root of a schedule: weeks, recurring sessions and assignments of one course.
    """

    weeks: List[Week] = field(default_factory=list)
    repeat_sessions: List[RecurringSession] = field(default_factory=list)
    assignments: List[Assignment] = field(default_factory=list)
    code: Optional[str] = None
    name: Optional[str] = None

    def week(self, index: int) -> Optional[Week]:
        """
        Return the week at `index`, or None if there is no such week.
        Negative indices are never valid.
        """
        if 0 <= index < len(self.weeks):
            return self.weeks[index]
        return None
