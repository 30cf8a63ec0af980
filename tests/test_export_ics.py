import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from coursecal.events import SessionEvent, SubmissionEvent
from coursecal.export_ics import export_events_to_ics, render_ics
from coursecal.model import Assignment, Session, Submission

TZ = timezone(timedelta(hours=11))
STAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestExportICS(unittest.TestCase):
    def test_export_creates_file_and_contains_calendar(self) -> None:
        events = [
            SessionEvent(
                Session(
                    kind="lecture",
                    title="Welcome",
                    time=datetime(2024, 2, 19, 10, 15, tzinfo=TZ),
                    duration=timedelta(minutes=105),
                    location="HS 8",
                    presenters=["Ada"],
                )
            )
        ]

        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "sub" / "out.ics"
            n = export_events_to_ics(events, out, code="COMP1000", stamp=STAMP)
            self.assertEqual(n, 1)
            text = out.read_text(encoding="utf-8")
            self.assertIn("BEGIN:VCALENDAR", text)
            self.assertIn("BEGIN:VEVENT", text)
            self.assertIn("SUMMARY:COMP1000 Welcome (lecture)", text)
            # 10:15+11:00 is 23:15 UTC on the previous day
            self.assertIn("DTSTART:20240218T231500Z", text)
            self.assertIn("DTEND:20240219T010000Z", text)
            self.assertIn("LOCATION:HS 8", text)
            self.assertIn("DESCRIPTION:Presented by: Ada", text)

    def test_submission_has_link_and_escaped_description(self) -> None:
        assignment = Assignment(name="A1", link="https://example.org/a1", description="Read; then write, twice")
        ev = SubmissionEvent(assignment, Submission(name="Final", time=datetime(2024, 3, 8, 23, 59, tzinfo=TZ)))

        text = render_ics([ev], stamp=STAMP)
        self.assertIn("URL:https://example.org/a1\r\n", text)
        self.assertIn(r"DESCRIPTION:Read\; then write\, twice" + "\r\n", text)
        self.assertIn("DTEND:20240308T130400Z", text)
        self.assertNotIn("LOCATION", text)

    def test_output_is_deterministic_with_stamp(self) -> None:
        ev = SessionEvent(Session(kind="lab", time=datetime(2024, 2, 19, tzinfo=TZ), duration=timedelta(hours=1)))
        self.assertEqual(render_ics([ev], stamp=STAMP), render_ics([ev], stamp=STAMP))
        self.assertIn("DTSTAMP:20240101T000000Z", render_ics([ev], stamp=STAMP))

    def test_long_lines_are_folded(self) -> None:
        ev = SessionEvent(
            Session(kind="lab", title="x" * 200, time=datetime(2024, 2, 19, tzinfo=TZ), duration=timedelta(hours=1))
        )
        text = render_ics([ev], stamp=STAMP)
        for line in text.split("\r\n"):
            self.assertLessEqual(len(line.encode("utf-8")), 75)
        self.assertIn("\r\n x", text)

    def test_parallel_events_get_distinct_uids(self) -> None:
        # same title and start, different rooms
        start = datetime(2024, 2, 20, 14, tzinfo=TZ)
        events = [
            SessionEvent(Session(kind="tutorial", time=start, duration=timedelta(hours=1), location=room))
            for room in ("Room 1", "Room 2")
        ]

        text = render_ics(events, stamp=STAMP)
        uids = [line for line in text.split("\r\n") if line.startswith("UID:")]
        self.assertEqual(len(uids), 2)
        self.assertEqual(len(set(uids)), 2)

    def test_duplicate_sessions_get_distinct_uids(self) -> None:
        session = Session(kind="tutorial", time=datetime(2024, 2, 20, 14, tzinfo=TZ), duration=timedelta(hours=1))
        text = render_ics([SessionEvent(session), SessionEvent(session)], stamp=STAMP)
        uids = {line for line in text.split("\r\n") if line.startswith("UID:")}
        self.assertEqual(len(uids), 2)

    def test_empty_calendar(self) -> None:
        text = render_ics([], stamp=STAMP)
        self.assertTrue(text.startswith("BEGIN:VCALENDAR\r\n"))
        self.assertTrue(text.endswith("END:VCALENDAR\r\n"))
        self.assertNotIn("VEVENT", text)


if __name__ == "__main__":
    unittest.main()
