"""
coursecal: turn a course schedule description into calendar events.
"""

from coursecal.errors import CourseError, MalformedInput, WeekOutOfRange
from coursecal.events import Event, course_events, iter_events, ordered_events
from coursecal.expand import expand_repeats
from coursecal.load import load_course, loads_course, parse_course

__all__ = [
    "CourseError",
    "Event",
    "MalformedInput",
    "WeekOutOfRange",
    "course_events",
    "expand_repeats",
    "iter_events",
    "load_course",
    "loads_course",
    "ordered_events",
    "parse_course",
]
