"""
Calendar events derived from an expanded course.

An event is one of three variants:

- SessionEvent:       a concrete session of some week
- SubmissionEvent:    a submission deadline of an assignment
- PresentationEvent:  a presentation of an assignment, held in a matching session

All variants expose the same read-only fields (start, end, title, location,
presenters, description, link) so renderers can treat them uniformly.
Events only refer to the course they were derived from; they are rebuilt on
every traversal and never modified.
Events compare by value but are not hashable, since the model objects they
wrap are plain mutable dataclasses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import ClassVar, Iterator, List, Optional, Union

from coursecal.expand import expand_repeats
from coursecal.model import Assignment, Course, Presentation, Session, Submission

logger = logging.getLogger(__name__)

# A submission is a deadline marker, not a timed block
SUBMISSION_DURATION = timedelta(minutes=5)


def _with_code(title: str, code: Optional[str]) -> str:
    return f"{code} {title}" if code else title


@dataclass(frozen=True)
class SessionEvent:
    session: Session

    rank: ClassVar[int] = 0

    @property
    def start(self) -> datetime:
        return self.session.time

    @property
    def end(self) -> datetime:
        return self.session.time + self.session.duration

    @property
    def title(self) -> str:
        if self.session.title is not None:
            return f"{self.session.title} ({self.session.kind})"
        return f"({self.session.kind})"

    @property
    def location(self) -> Optional[str]:
        return self.session.location

    @property
    def presenters(self) -> List[str]:
        return list(self.session.presenters)

    @property
    def description(self) -> Optional[str]:
        return None

    @property
    def link(self) -> Optional[str]:
        return None

    def summary(self, code: Optional[str] = None) -> str:
        return _with_code(self.title, code)

    def sort_key(self) -> tuple:
        return (self.start, self.rank, self.session.sort_key())


@dataclass(frozen=True)
class SubmissionEvent:
    assignment: Assignment
    submission: Submission

    rank: ClassVar[int] = 1

    @property
    def start(self) -> datetime:
        return self.submission.time

    @property
    def end(self) -> datetime:
        return self.submission.time + SUBMISSION_DURATION

    @property
    def title(self) -> str:
        return f"{self.assignment.name}: {self.submission.name} (submission)"

    @property
    def location(self) -> Optional[str]:
        return None

    @property
    def presenters(self) -> List[str]:
        return []

    @property
    def description(self) -> Optional[str]:
        if self.submission.description is not None:
            return self.submission.description
        return self.assignment.description

    @property
    def link(self) -> Optional[str]:
        return self.assignment.link

    def summary(self, code: Optional[str] = None) -> str:
        return _with_code(self.title, code)

    def sort_key(self) -> tuple:
        return (self.start, self.rank, self.assignment.sort_key(), self.submission.sort_key())


@dataclass(frozen=True)
class PresentationEvent:
    assignment: Assignment
    presentation: Presentation
    session: Session

    rank: ClassVar[int] = 2

    @property
    def start(self) -> datetime:
        return self.session.time

    @property
    def end(self) -> datetime:
        return self.session.time + self.session.duration

    @property
    def title(self) -> str:
        return f"{self.assignment.name}: {self.presentation.name} (presentation)"

    @property
    def location(self) -> Optional[str]:
        return self.session.location

    @property
    def presenters(self) -> List[str]:
        return list(self.session.presenters)

    @property
    def description(self) -> Optional[str]:
        if self.presentation.description is not None:
            return self.presentation.description
        return self.assignment.description

    @property
    def link(self) -> Optional[str]:
        return self.assignment.link

    def summary(self, code: Optional[str] = None) -> str:
        return _with_code(self.title, code)

    def sort_key(self) -> tuple:
        return (
            self.start,
            self.rank,
            self.assignment.sort_key(),
            self.presentation.sort_key(),
            self.session.sort_key(),
        )


Event = Union[SessionEvent, SubmissionEvent, PresentationEvent]


def iter_events(course: Course) -> Iterator[Event]:
    """
    Yield every event of an already expanded course, unordered.

    Presentations only produce events for sessions of the matching kind.
    A presentation week without such a session, or a week index the course
    does not have, yields nothing.
    """
    for week in course.weeks:
        for session in week.sessions:
            yield SessionEvent(session)

    for assignment in course.assignments:
        for submission in assignment.submissions:
            yield SubmissionEvent(assignment, submission)

        for presentation in assignment.presentations:
            for week_no in presentation.weeks:
                week = course.week(week_no)
                if week is None:
                    logger.warning(
                        "Presentation %r of %r refers to non-existent week %d, skipping",
                        presentation.name,
                        assignment.name,
                        week_no,
                    )
                    continue
                for session in week.sessions:
                    if session.kind == presentation.session:
                        yield PresentationEvent(assignment, presentation, session)


def ordered_events(course: Course) -> list[Event]:
    """
    All events of an expanded course, sorted by start time.

    Ties are broken by variant (sessions, then submissions, then presentations)
    and then by the fields of the underlying model objects.
    """
    return sorted(iter_events(course), key=lambda ev: ev.sort_key())


def course_events(course: Course) -> list[Event]:
    """
    Expand the recurring sessions of `course` and return its ordered events.
    """
    return ordered_events(expand_repeats(course))
