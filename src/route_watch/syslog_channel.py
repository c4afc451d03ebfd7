# --- Standard library imports ---
import socket
import logging
import logging.handlers

# --- Project imports ---
from .alerts import Alert
from .config import SyslogTarget
from .logger import get_logger
from .models import Severity


logger = get_logger("syslog_channel")

LOCAL_SYSLOG_SOCKET = "/dev/log"

class StrictSysLogHandler(logging.handlers.SysLogHandler):
    """
    SysLogHandler that understands all eight syslog severities and lets
    delivery errors propagate to the caller instead of printing them.
    """

    def mapPriority(self, levelName: str) -> str:
        # Records built by SyslogChannel carry the syslog priority name directly
        if levelName in self.priority_names:
            return levelName
        return super().mapPriority(levelName)

    def handleError(self, record: logging.LogRecord) -> None:
        # Called from inside emit()'s except block; re-raise the active error
        raise


class SyslogChannel:
    """
    Writes one human-readable line per alert to syslog.

    Remote collectors are reached over UDP; an empty host uses the local
    /dev/log socket. Socket errors are retried `retries` times.
    """

    name = "syslog"

    def __init__(self, target: SyslogTarget):
        if target.facility not in logging.handlers.SysLogHandler.facility_names:
            raise ValueError(f"Unknown syslog facility: {target.facility!r}")
        self.target = target

    @property
    def address(self):
        if self.target.host:
            return (self.target.host, self.target.port)
        return LOCAL_SYSLOG_SOCKET

    def format_line(self, alert: Alert) -> str:
        return f"[{alert.severity}] {alert.message}"

    def make_record(self, severity: Severity, message: str) -> logging.LogRecord:
        return logging.makeLogRecord({
            "name": self.target.tag,
            "levelno": severity.log_level,
            "levelname": severity.syslog_name,
            "msg": message,
        })

    def _open_handler(self) -> StrictSysLogHandler:
        handler = StrictSysLogHandler(
            address=self.address,
            facility=self.target.facility,
            socktype=socket.SOCK_DGRAM,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        # Unix socket connect errors are swallowed by SysLogHandler itself
        if handler.socket is None or handler.socket.fileno() == -1:
            handler.close()
            raise ConnectionError(f"Cannot connect to syslog socket {self.address}")
        handler.socket.settimeout(self.target.timeout)
        return handler

    def emit(self, severity: Severity, message: str) -> None:
        """
        Send `message` at any of the eight syslog severities.

        Raises:
            OSError: If every attempt fails
        """
        record = self.make_record(severity, message)
        attempts = max(self.target.retries, 0) + 1
        last_error: OSError | None = None

        for attempt in range(1, attempts + 1):
            handler = None
            try:
                handler = self._open_handler()
                handler.handle(record)
                return
            except OSError as e:
                last_error = e
                logger.debug(f"Syslog attempt {attempt}/{attempts} failed ({e})")
            finally:
                if handler is not None:
                    handler.close()

        raise last_error

    def send(self, alert: Alert) -> None:
        self.emit(alert.severity, self.format_line(alert))
