"""
Recurring session expansion.

Every recurring session becomes one concrete session per listed week:

    session.time = week.start + (repeat.first - reference_week.start)

where the reference week is the first week in the repeat's week list.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from coursecal.errors import WeekOutOfRange
from coursecal.model import Course, Session, Week

logger = logging.getLogger(__name__)


def expand_repeats(course: Course) -> Course:
    """
    Return a new Course with all recurring sessions materialized into their weeks.

    Generated sessions are appended after the sessions declared directly in a week,
    in repeat declaration order. The input course is left untouched.

    Raises WeekOutOfRange if a repeat names a week the course does not have.
    Nothing is applied in that case.
    """
    generated: list[tuple[int, Session]] = []

    for repeat in course.repeat_sessions:
        if not repeat.weeks:
            continue

        reference = course.week(repeat.weeks[0])
        if reference is None:
            raise WeekOutOfRange(repeat.kind, repeat.weeks[0])

        for week_no in repeat.weeks:
            week = course.week(week_no)
            if week is None:
                raise WeekOutOfRange(repeat.kind, week_no)
            generated.append((week_no, repeat.occurrence(reference.start, week.start)))

    weeks = [Week(start=w.start, sessions=list(w.sessions)) for w in course.weeks]
    for week_no, session in generated:
        weeks[week_no].sessions.append(session)

    logger.debug(
        "Expanded %d recurring sessions into %d sessions",
        len(course.repeat_sessions),
        len(generated),
    )

    return replace(course, weeks=weeks, repeat_sessions=list(course.repeat_sessions))
