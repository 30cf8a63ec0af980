"""
Loading (TOML -> Course).

Reads a course description and maps it onto the model in coursecal/model.py.

Type rules:
- timestamps: TOML offset datetimes or RFC 3339 strings, always with a UTC offset
- durations:  integer seconds
- links:      absolute URLs (scheme + host)

Any violation raises MalformedInput naming the key path, so the core never
sees badly typed data.
"""

from __future__ import annotations

import re
import tomllib
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from coursecal.errors import MalformedInput
from coursecal.model import Assignment, Course, Presentation, RecurringSession, Session, Submission, Week

# date-time from RFC 3339 section 5.6; the offset is mandatory
RFC3339_RE = re.compile(r"\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})")


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _require(table: Dict[str, Any], key: str, path: str) -> Any:
    if key not in table:
        raise MalformedInput(f"{path}.{key}" if path else key, "missing required key")
    return table[key]


def _str(table: Dict[str, Any], key: str, path: str, required: bool = True) -> Optional[str]:
    value = _require(table, key, path) if required else table.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedInput(f"{path}.{key}" if path else key, f"expected a string, got {value!r}")
    return value


def parse_datetime(value: Any, path: str) -> datetime:
    """
    Parse a timestamp. tomllib already decodes TOML datetimes; strings are parsed as RFC 3339.
    """
    if isinstance(value, str):
        if not RFC3339_RE.fullmatch(value):
            raise MalformedInput(path, f"invalid timestamp {value!r}")
        try:
            value = datetime.fromisoformat(value.upper())
        except ValueError:
            raise MalformedInput(path, f"invalid timestamp {value!r}") from None
    if not isinstance(value, datetime):
        raise MalformedInput(path, f"expected a timestamp, got {value!r}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise MalformedInput(path, "timestamp must include a UTC offset")
    return value


def parse_duration(value: Any, path: str) -> timedelta:
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedInput(path, f"expected a duration in seconds, got {value!r}")
    return timedelta(seconds=value)


def parse_url(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise MalformedInput(path, f"expected a URL, got {value!r}")
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise MalformedInput(path, f"invalid URL {value!r}")
    return value


def _str_list(value: Any, path: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(x, str) for x in value):
        raise MalformedInput(path, f"expected a list of strings, got {value!r}")
    return list(value)


def _index_list(value: Any, path: str) -> List[int]:
    if not isinstance(value, list) or not all(isinstance(x, int) and not isinstance(x, bool) for x in value):
        raise MalformedInput(path, f"expected a list of week numbers, got {value!r}")
    return list(value)


def _tables(data: Dict[str, Any], key: str, path: str) -> List[Dict[str, Any]]:
    """
    Return the array of tables under `key` (e.g. [[week]]), or [] if absent.
    """
    value = data.get(key, [])
    full = f"{path}.{key}" if path else key
    if not isinstance(value, list) or not all(isinstance(x, dict) for x in value):
        raise MalformedInput(full, "expected an array of tables")
    return value


def _value(table: Dict[str, Any], path: str) -> Optional[float]:
    value = table.get("value")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedInput(f"{path}.value", f"expected a number, got {value!r}")
    return float(value)


# ---------------------------------------------------------------------------
# Table parsing
# ---------------------------------------------------------------------------


def _parse_session(t: Dict[str, Any], path: str) -> Session:
    return Session(
        kind=_str(t, "kind", path),
        time=parse_datetime(_require(t, "time", path), f"{path}.time"),
        duration=parse_duration(_require(t, "duration", path), f"{path}.duration"),
        title=_str(t, "title", path, required=False),
        location=_str(t, "location", path, required=False),
        presenters=_str_list(t.get("presenters", []), f"{path}.presenters"),
    )


def _parse_week(t: Dict[str, Any], path: str) -> Week:
    sessions = [
        _parse_session(s, f"{path}.session[{i}]") for i, s in enumerate(_tables(t, "session", path))
    ]
    return Week(start=parse_datetime(_require(t, "start", path), f"{path}.start"), sessions=sessions)


def _parse_repeat(t: Dict[str, Any], path: str) -> RecurringSession:
    return RecurringSession(
        kind=_str(t, "kind", path),
        first=parse_datetime(_require(t, "first", path), f"{path}.first"),
        duration=parse_duration(_require(t, "duration", path), f"{path}.duration"),
        weeks=_index_list(_require(t, "weeks", path), f"{path}.weeks"),
        title=_str(t, "title", path, required=False),
        location=_str(t, "location", path, required=False),
        presenters=_str_list(t.get("presenters", []), f"{path}.presenters"),
    )


def _parse_submission(t: Dict[str, Any], path: str) -> Submission:
    return Submission(
        name=_str(t, "name", path),
        time=parse_datetime(_require(t, "time", path), f"{path}.time"),
        description=_str(t, "description", path, required=False),
    )


def _parse_presentation(t: Dict[str, Any], path: str) -> Presentation:
    return Presentation(
        name=_str(t, "name", path),
        session=_str(t, "session", path),
        weeks=_index_list(_require(t, "weeks", path), f"{path}.weeks"),
        description=_str(t, "description", path, required=False),
    )


def _parse_assignment(t: Dict[str, Any], path: str) -> Assignment:
    return Assignment(
        name=_str(t, "name", path),
        link=parse_url(_require(t, "link", path), f"{path}.link"),
        description=_str(t, "description", path, required=False),
        value=_value(t, path),
        submissions=[
            _parse_submission(s, f"{path}.submission[{i}]")
            for i, s in enumerate(_tables(t, "submission", path))
        ],
        presentations=[
            _parse_presentation(p, f"{path}.presentation[{i}]")
            for i, p in enumerate(_tables(t, "presentation", path))
        ],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_course(data: Dict[str, Any]) -> Course:
    """
    Build a Course from an already decoded TOML document.
    """
    return Course(
        weeks=[_parse_week(w, f"week[{i}]") for i, w in enumerate(_tables(data, "week", ""))],
        repeat_sessions=[_parse_repeat(s, f"session[{i}]") for i, s in enumerate(_tables(data, "session", ""))],
        assignments=[_parse_assignment(a, f"assignment[{i}]") for i, a in enumerate(_tables(data, "assignment", ""))],
        code=_str(data, "code", "", required=False),
        name=_str(data, "name", "", required=False),
    )


def loads_course(text: str) -> Course:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise MalformedInput("", f"invalid TOML: {exc}") from exc
    return parse_course(data)


def load_course(path: str | Path) -> Course:
    """
    Read and parse a course TOML file.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedInput("", f"cannot read {p}: {exc}") from exc
    return loads_course(text)
