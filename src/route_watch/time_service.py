# --- Standard library imports ---
import os
import time
from zoneinfo import ZoneInfo
from datetime import datetime, timezone


class TimeService:
    """
    Wall clock for state timestamps and human-readable output.

    - TZ loaded once during class initialization
    - Provides:
        * now_epoch()
        * format_local()
        * epoch_to_local_string()
    """

    def __init__(self):
        tz_name = os.getenv("TZ", "UTC")
        try:
            self.tz = ZoneInfo(tz_name)
        except Exception:
            self.tz = ZoneInfo("UTC")

    def now_epoch(self) -> int:
        """Current time as whole seconds since the epoch."""
        return int(time.time())

    def format_local(self, dt: datetime) -> str:
        """Format a datetime into the 'MM/DD/YY @ HH:MM:SS TZ' format."""
        return dt.strftime("%m/%d/%y @ %H:%M:%S %Z")

    def epoch_to_local_string(self, ts: int) -> str:
        """
        Convert an epoch timestamp to 'MM/DD/YY @ HH:MM:SS TZ'.

        A zero timestamp means "never checked" and is rendered as such.
        """
        if not ts:
            return "never"
        dt = datetime.fromtimestamp(ts, tz=timezone.utc).astimezone(self.tz)
        return self.format_local(dt)
