# --- Standard library imports ---
import logging


def tlog(
    logger: logging.Logger,
    emoji: str,
    subsystem: str,
    state: str,
    primary: str = "—--",
    meta: str | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Emit a standardized telemetry log "tlog" line.

    Format:
        SUBSYSTEM STATE PRIMARY | meta data
    """
    msg = f"{subsystem:<12} {state:<20} {primary:<18}"
    if meta:
        msg += f" | {meta}"

    logger.log(level, f"{emoji} {msg}", stacklevel=2)

def cycle_summary(report, time_service) -> str:
    """
    Plain-text summary of one monitor cycle, printed in debug mode.
    """
    info = report.info
    if info.exists:
        route_line = (
            f"present  age={info.age_seconds}s  "
            f"next_hop={info.next_hop or 'connected'}  metric={info.metric}"
        )
    else:
        route_line = "absent"

    if report.alert is None:
        alert_line = "none"
    else:
        delivered = ", ".join(
            f"{d.channel}={'ok' if d.ok else 'FAILED'}" for d in report.deliveries
        )
        alert_line = f"{report.alert} ({report.alert.severity}) → {delivered or 'no channels'}"

    lines = [
        "── route-watch cycle ──",
        f"route      : {report.route}",
        f"lookup     : {route_line}",
        f"threshold  : {report.threshold}s",
        f"prior      : {report.prior.last_status} "
        f"(checked {time_service.epoch_to_local_string(report.prior.last_check)})",
        f"current    : {report.current}",
        f"alert      : {alert_line}",
        f"state saved: {'yes' if report.saved else 'NO'} "
        f"({time_service.epoch_to_local_string(report.checked_at)})",
    ]
    return "\n".join(lines)
