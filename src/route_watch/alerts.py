# --- Standard library imports ---
from typing import Protocol
from dataclasses import dataclass

# --- Project imports ---
from .logger import get_logger
from .models import AlertKind, RouteInfo, Severity


logger = get_logger("alerts")

ALERT_EMOJI = {
    AlertKind.MISSING: "🚨",
    AlertKind.FLAPPING: "🌀",
    AlertKind.RECOVERED: "✅",
}

@dataclass(frozen=True)
class Alert:
    """One structured notification about a status transition."""
    kind: AlertKind
    severity: Severity
    route: str
    next_hop: str
    age_seconds: int | None
    message: str

    def as_dict(self) -> dict:
        return {
            "kind": self.kind.name,
            "trap_type": self.kind.trap_type,
            "severity": self.severity.syslog_name,
            "route": self.route,
            "next_hop": self.next_hop,
            "age_seconds": self.age_seconds,
            "message": self.message,
        }

def build_alert(kind: AlertKind, route: str, info: RouteInfo) -> Alert:
    """
    Assemble the alert for `kind`.

    Next hop and age are only reported when the route exists.
    """
    next_hop = info.next_hop if info.exists else ""
    age = info.age_seconds if info.exists else None

    match kind:
        case AlertKind.MISSING:
            message = f"Route {route} is missing from the routing table"
        case AlertKind.FLAPPING:
            message = f"Route {route} is flapping (age {age}s via {next_hop or 'connected'})"
        case AlertKind.RECOVERED:
            message = f"Route {route} recovered and is stable (age {age}s via {next_hop or 'connected'})"

    return Alert(
        kind=kind,
        severity=kind.severity,
        route=route,
        next_hop=next_hop,
        age_seconds=age,
        message=message,
    )


class AlertChannel(Protocol):
    """Anything that can deliver an alert. `send` raises on failure."""
    name: str

    def send(self, alert: Alert) -> None: ...

@dataclass(frozen=True)
class DeliveryResult:
    channel: str
    ok: bool
    error: str | None = None

class AlertDispatcher:
    """
    Fans an alert out to every configured channel.

    Channels are isolated from each other: a failure in one is logged and
    recorded, and the remaining channels still run. `dispatch` never raises.
    """

    def __init__(self, channels: list[AlertChannel]):
        self.channels = list(channels)

    def dispatch(self, alert: Alert) -> list[DeliveryResult]:
        logger.info(f"{ALERT_EMOJI[alert.kind]} {alert.kind} [{alert.severity}] {alert.message}")

        results = []
        for channel in self.channels:
            try:
                channel.send(alert)
            except Exception as e:
                logger.warning(
                    f"Alert delivery via {channel.name} failed ({type(e).__name__}: {e})"
                )
                results.append(DeliveryResult(channel.name, ok=False, error=str(e)))
                continue

            logger.debug(f"Alert delivered via {channel.name}")
            results.append(DeliveryResult(channel.name, ok=True))

        if not self.channels:
            logger.warning("No alert channels configured; alert only logged locally")

        return results
