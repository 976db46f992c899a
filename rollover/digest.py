from datetime import date, datetime, timedelta, tzinfo
from html import escape

from .core.models import RunStat
from .core.types import Notifier
from .lib.log import log
from .runlog import RunLog

DIGEST_DAYS = 7
SUBJECT = "Rollover - Weekly Digest"
FAILURE_SUBJECT = "Rollover Digest Failure"

_CELL = "padding: 8px; border-bottom: 1px solid #ddd;"
_HEAD = "padding: 12px; border-bottom: 2px solid #333;"


def daily_rollovers(runs: list[RunStat], now: datetime, zone: tzinfo) -> list[tuple[date, int]]:
    """Rolled-over task counts for the last seven local days, oldest first.

    A day with several runs reports its latest one; a day without runs reports 0.
    """
    by_day: dict[date, int] = {}
    for run in runs:
        by_day[run.timestamp.astimezone(zone).date()] = run.inbox_adds
    today = now.astimezone(zone).date()
    days = [today - timedelta(days=i) for i in reversed(range(DIGEST_DAYS))]
    return [(d, by_day.get(d, 0)) for d in days]


def render_html(rows: list[tuple[date, int]]) -> str:
    body = "".join(
        f'<tr><td style="{_CELL}">{escape(f"{d:%A, %B} {d.day}")}</td>'
        f'<td style="{_CELL} text-align: center;">{count}</td></tr>'
        for d, count in rows
    )
    return f"""<html>
  <body style="font-family: sans-serif; margin: 20px;">
    <h2>Rollover Weekly Summary</h2>
    <p>Here is your daily breakdown of rolled-over tasks for the past 7 days:</p>
    <table style="width: 100%; border-collapse: collapse;">
      <thead>
        <tr>
          <th style="{_HEAD} text-align: left;">Day</th>
          <th style="{_HEAD} text-align: center;">Tasks Rolled Over</th>
        </tr>
      </thead>
      <tbody>{body}</tbody>
    </table>
    <p style="font-size: 12px; color: #777; margin-top: 20px;">This is an automated report from rollover.</p>
  </body>
</html>"""


def render_text(rows: list[tuple[date, int]]) -> str:
    lines = ["Tasks rolled over, past 7 days:", ""]
    lines.extend(f"  {d:%A, %B} {d.day}: {count}" for d, count in rows)
    return "\n".join(lines)


class DigestMailer:
    def __init__(self, run_log: RunLog, notifier: Notifier, recipient: str, zone: tzinfo):
        self.run_log = run_log
        self.notifier = notifier
        self.recipient = recipient
        self.zone = zone

    def send_weekly_digest(self, now: datetime) -> bool:
        """Send the digest. Failures are reported by mail, never raised."""
        try:
            runs = self.run_log.since(now - timedelta(days=DIGEST_DAYS))
            rows = daily_rollovers(runs, now, self.zone)
            self.notifier.send(self.recipient, SUBJECT, render_text(rows), html=render_html(rows))
        except Exception as e:
            log(f"failed to send weekly digest: {e}")
            self.notifier.send(
                self.recipient,
                FAILURE_SUBJECT,
                f"The weekly digest could not be generated or sent.\n\nError: {e}",
            )
            return False
        log(f"weekly digest sent to {self.recipient}")
        return True
