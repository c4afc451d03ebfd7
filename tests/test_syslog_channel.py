import socket
from unittest.mock import patch

import pytest

from route_watch.alerts import build_alert
from route_watch.config import SyslogTarget
from route_watch.models import AlertKind, RouteInfo, Severity
from route_watch.syslog_channel import StrictSysLogHandler, SyslogChannel


ROUTE = "10.20.0.0/16"


# ========
# FIXTURES
# ========
@pytest.fixture
def collector():
    """A throwaway UDP syslog collector on localhost"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2)
    yield sock
    sock.close()

def target_for(collector, **overrides):
    host, port = collector.getsockname()
    settings = {"host": host, "port": port, "facility": "local0", "tag": "route-watch",
                "timeout": 2, "retries": 2}
    settings.update(overrides)
    return SyslogTarget(**settings)


# ===========================
# TEST GROUP: Syslog Delivery
# ===========================
# Function: SyslogChannel.send()
# ------------------------------
@pytest.mark.parametrize(
    "kind, severity_number",
    [
        (AlertKind.MISSING, 2),     # crit
        (AlertKind.FLAPPING, 4),    # warning
        (AlertKind.RECOVERED, 6),   # info
    ],
)

def test_send_alert_line(collector, kind, severity_number):
    """Alert arrives with local0 facility, the right severity and the message"""
    info = RouteInfo(True, 5, "192.0.2.1", 0) if kind is not AlertKind.MISSING else RouteInfo.missing()
    alert = build_alert(kind, ROUTE, info)

    SyslogChannel(target_for(collector)).send(alert)

    data = collector.recv(4096).decode()
    local0 = 16
    assert data.startswith(f"<{local0 * 8 + severity_number}>route-watch: [{alert.severity}] ")
    assert alert.message in data

@pytest.mark.parametrize("severity", list(Severity))
def test_emit_supports_all_eight_severities(collector, severity):
    SyslogChannel(target_for(collector, facility="daemon")).emit(severity, "probe")

    data = collector.recv(4096).decode()
    daemon = 3
    assert data.startswith(f"<{daemon * 8 + severity.priority}>")

def test_unknown_facility_rejected():
    with pytest.raises(ValueError):
        SyslogChannel(SyslogTarget(facility="nonsense"))

def test_empty_host_uses_local_socket():
    assert SyslogChannel(SyslogTarget(host="")).address == "/dev/log"


# ================================
# TEST GROUP: Retries and Failures
# ================================
def test_retries_then_raises(collector):
    """Every attempt fails → one try plus `retries` retries, then the error"""
    channel = SyslogChannel(target_for(collector, retries=2))
    alert = build_alert(AlertKind.MISSING, ROUTE, RouteInfo.missing())

    with patch.object(StrictSysLogHandler, "emit", side_effect=OSError("unreachable")) as mock_emit:
        with pytest.raises(OSError, match="unreachable"):
            channel.send(alert)

    assert mock_emit.call_count == 3

def test_retry_recovers_after_transient_error(collector):
    channel = SyslogChannel(target_for(collector, retries=2))
    real_emit = StrictSysLogHandler.emit
    calls = {"n": 0}

    def flaky_emit(self, record):
        calls["n"] += 1
        if calls["n"] == 1:
            raise OSError("transient")
        return real_emit(self, record)

    with patch.object(StrictSysLogHandler, "emit", flaky_emit):
        channel.emit(Severity.NOTICE, "second time lucky")

    assert calls["n"] == 2
    assert "second time lucky" in collector.recv(4096).decode()

def test_missing_local_socket_raises(tmp_path):
    channel = SyslogChannel(SyslogTarget(host="", retries=0))

    with patch("route_watch.syslog_channel.LOCAL_SYSLOG_SOCKET", str(tmp_path / "no-such-socket")):
        with pytest.raises(OSError):
            channel.emit(Severity.INFO, "nobody listening")

def test_handler_error_propagates():
    """StrictSysLogHandler re-raises instead of printing a traceback"""
    handler = StrictSysLogHandler(address=("127.0.0.1", 9))
    try:
        with patch.object(handler, "socket") as sock:
            sock.sendto.side_effect = OSError("boom")
            record = SyslogChannel(SyslogTarget()).make_record(Severity.ERROR, "x")
            with pytest.raises(OSError, match="boom"):
                handler.handle(record)
    finally:
        handler.close()
