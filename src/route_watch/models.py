# --- Standard library imports ---
import logging
from enum import Enum
from dataclasses import dataclass

# --- Project imports ---
from .logger import NOTICE as NOTICE_LEVEL


class Status(Enum):
    """
    Stability classification of the watched route.

    • UNKNOWN   — no prior observation (default state only)
    • MISSING   — route absent from the routing table
    • FLAPPING  — route present but younger than the flap threshold
    • STABLE    — route present and old enough to trust
    """
    UNKNOWN = "UNKNOWN"
    MISSING = "MISSING"
    FLAPPING = "FLAPPING"
    STABLE = "STABLE"

    def __str__(self) -> str:
        return self.name

STATUS_EMOJI = {
    Status.UNKNOWN:  "⚪",
    Status.MISSING:  "🔴",
    Status.FLAPPING: "🟡",
    Status.STABLE:   "💚",
}

class Severity(Enum):
    """
    The eight syslog severities, most severe first.

    Each member carries (syslog priority number, syslog priority name,
    Python logging level).
    """
    EMERGENCY = (0, "emerg", logging.CRITICAL)
    ALERT = (1, "alert", logging.CRITICAL)
    CRITICAL = (2, "crit", logging.CRITICAL)
    ERROR = (3, "err", logging.ERROR)
    WARNING = (4, "warning", logging.WARNING)
    NOTICE = (5, "notice", NOTICE_LEVEL)
    INFO = (6, "info", logging.INFO)
    DEBUG = (7, "debug", logging.DEBUG)

    def __init__(self, priority: int, syslog_name: str, log_level: int):
        self.priority = priority
        self.syslog_name = syslog_name
        self.log_level = log_level

    def __str__(self) -> str:
        return self.name

class AlertKind(Enum):
    """Status transitions worth telling someone about."""
    MISSING = (1, Severity.CRITICAL)
    FLAPPING = (2, Severity.WARNING)
    RECOVERED = (3, Severity.INFO)

    def __init__(self, trap_type: int, severity: Severity):
        self.trap_type = trap_type
        self.severity = severity

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RouteInfo:
    """
    Snapshot of one routing-table lookup.

    When `exists` is False the remaining fields carry no meaning.
    """
    exists: bool
    age_seconds: int = 0
    next_hop: str = ""
    metric: int = 0

    @classmethod
    def missing(cls) -> "RouteInfo":
        return cls(exists=False)

@dataclass(frozen=True)
class MonitorState:
    """Last observed status, persisted between invocations."""
    last_status: Status = Status.UNKNOWN
    last_check: int = 0
