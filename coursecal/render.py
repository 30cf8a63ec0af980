"""
Human readable output of course events.

- render_text(): plain text listing, one block per event
- print_table(): compact overview as a rich table
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coursecal.events import Event


def format_time(dt: datetime) -> str:
    """
    Format like '10:00 Monday, 19 February, 2024' (hour padded with a space).
    """
    return f"{dt.hour:2d}:{dt:%M %A, %d %B, %Y}"


def render_event_text(ev: Event, code: Optional[str] = None) -> str:
    title = ev.summary(code)
    lines = [title, "=" * len(title)]
    lines.append(f"Start: {format_time(ev.start)}")
    lines.append(f"End: {format_time(ev.end)}")
    if ev.location:
        lines.append(f"Location: {ev.location}")
    for presenter in ev.presenters:
        lines.append(f"Presented by: {presenter}")
    if ev.link:
        lines.append(f"Link: {ev.link}")
    if ev.description:
        lines.append("")
        lines.append(ev.description)
    lines.append("")
    return "\n".join(lines) + "\n"


def render_text(events: Iterable[Event], code: Optional[str] = None) -> str:
    return "".join(render_event_text(ev, code) for ev in events)


def build_table(events: Iterable[Event], code: Optional[str] = None, title: Optional[str] = None) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Event")
    table.add_column("Location")
    table.add_column("Presenters")

    for ev in events:
        table.add_row(
            f"{ev.start:%a %Y-%m-%d %H:%M}",
            f"{ev.end:%H:%M}",
            f"[bold]{escape(ev.summary(code))}[/]",
            escape(ev.location or ""),
            escape(", ".join(ev.presenters)),
        )
    return table


def print_table(
    events: Iterable[Event],
    console: Optional[Console] = None,
    code: Optional[str] = None,
    title: Optional[str] = None,
) -> None:
    """
    Print events as a table to `console` (a fresh Console on stdout by default).
    """
    console = console if console is not None else Console()
    console.print(build_table(events, code=code, title=title))
