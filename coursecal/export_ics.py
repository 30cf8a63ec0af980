"""
iCalendar (.ics) export.

We convert the ordered course events into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Times are written in UTC ('Z' suffix); every event already carries its own
fixed offset, so this is a plain conversion.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from coursecal.events import Event

logger = logging.getLogger(__name__)


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _fold(line: str) -> list[str]:
    """
    Split a content line into 75-octet pieces; continuation lines start with a space.
    """
    out: list[str] = []
    current = ""
    size = 0
    for ch in line:
        n = len(ch.encode("utf-8"))
        if size + n > 75:
            out.append(current)
            current = " "
            size = 1
        current += ch
        size += n
    out.append(current)
    return out


def _dt_utc(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _uid(summary: str, dtstart: str, position: int) -> str:
    # position keeps parallel events with equal summary and start apart
    digest = hashlib.sha1(f"{summary}|{dtstart}|{position}".encode("utf-8")).hexdigest()[:16]
    return f"{dtstart}-{digest}@coursecal"


def _description(ev: Event) -> str:
    parts: list[str] = []
    if ev.description:
        parts.append(ev.description.strip())
    for presenter in ev.presenters:
        parts.append(f"Presented by: {presenter}")
    return "\n".join(parts)


def render_ics(events: Iterable[Event], code: Optional[str] = None, stamp: Optional[datetime] = None) -> str:
    """
    Render events as iCalendar text (CRLF line endings).

    `stamp` is used as DTSTAMP for every event; defaults to now.
    """
    dtstamp = _dt_utc(stamp if stamp is not None else datetime.now(timezone.utc))

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//coursecal//EN")
    lines.append("CALSCALE:GREGORIAN")

    for position, ev in enumerate(events):
        summary = ev.summary(code)
        dtstart = _dt_utc(ev.start)

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_uid(summary, dtstart, position)}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{_dt_utc(ev.end)}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if ev.location:
            lines.append(f"LOCATION:{_ics_escape(ev.location)}")
        description = _description(ev)
        if description:
            lines.append(f"DESCRIPTION:{_ics_escape(description)}")
        if ev.link:
            lines.append(f"URL:{ev.link}")
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")

    folded: list[str] = []
    for line in lines:
        folded.extend(_fold(line))

    # ICS standard uses CRLF
    return "\r\n".join(folded) + "\r\n"


def export_events_to_ics(
    events: Iterable[Event],
    out_path: str | Path,
    code: Optional[str] = None,
    stamp: Optional[datetime] = None,
) -> int:
    """
    Export events to an .ics file. Returns number of exported events.
    """
    events = list(events)
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    out.write_text(render_ics(events, code=code, stamp=stamp), encoding="utf-8", newline="")
    logger.info("Wrote %d events to %s", len(events), out)
    return len(events)
