# --- Standard library imports ---
import re
import json
import subprocess

# --- Project imports ---
from .logger import get_logger
from .models import RouteInfo


logger = get_logger("route_query")

# FRR renders route uptime in one of three shapes depending on age
_UPTIME_HMS = re.compile(r"^(\d+):(\d{2}):(\d{2})$")       # < 1 day     01:02:03
_UPTIME_DHM = re.compile(r"^(\d+)d(\d{2})h(\d{2})m$")      # < 1 week    3d04h05m
_UPTIME_WDH = re.compile(r"^(\d+)w(\d)d(\d{2})h$")          # otherwise   12w3d04h

def parse_frr_uptime(text: str) -> int:
    """
    Convert an FRR route uptime string into seconds.

    Raises:
        ValueError: If the string matches none of the known formats
    """
    value = (text or "").strip()

    if m := _UPTIME_HMS.match(value):
        h, mi, s = map(int, m.groups())
        return h * 3600 + mi * 60 + s

    if m := _UPTIME_DHM.match(value):
        d, h, mi = map(int, m.groups())
        return d * 86400 + h * 3600 + mi * 60

    if m := _UPTIME_WDH.match(value):
        w, d, h = map(int, m.groups())
        return w * 604800 + d * 86400 + h * 3600

    raise ValueError(f"Unrecognized route uptime: {text!r}")

def _pick_entry(entries: list) -> dict:
    """Prefer the FIB-selected entry; fall back to the first one."""
    for entry in entries:
        if entry.get("selected"):
            return entry
    return entries[0]

def _pick_next_hop(entry: dict) -> str:
    """First active next hop's address; empty for directly connected routes."""
    nexthops = entry.get("nexthops") or []
    if not nexthops:
        return ""
    active = [nh for nh in nexthops if nh.get("active")]
    return str((active or nexthops)[0].get("ip", ""))

def parse_route_json(route: str, payload: str) -> RouteInfo:
    """
    Extract the watched route from `show ip route <prefix> json` output.

    Raises:
        ValueError: If the payload is not JSON or has an unexpected shape
    """
    data = json.loads(payload or "{}")
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    entries = data.get(route)
    if not entries:
        return RouteInfo.missing()
    if not isinstance(entries, list):
        raise ValueError(f"Expected a list of entries for {route}")

    entry = _pick_entry(entries)
    return RouteInfo(
        exists=True,
        age_seconds=parse_frr_uptime(entry.get("uptime", "")),
        next_hop=_pick_next_hop(entry),
        metric=int(entry.get("metric", 0)),
    )


class VtyshRouteProvider:
    """
    Looks up a single prefix in the FRR routing table through `vtysh`.

    Any failure (binary missing, timeout, non-zero exit, malformed output)
    is logged and reported as a missing route, same as "not found".
    """

    def __init__(self, vtysh_path: str = "vtysh", timeout: int = 15, ipv6: bool = False):
        self.vtysh_path = vtysh_path
        self.timeout = timeout
        self.afi = "ipv6" if ipv6 else "ip"

    def build_command(self, route: str) -> list[str]:
        return [self.vtysh_path, "-c", f"show {self.afi} route {route} json"]

    def query(self, route: str) -> RouteInfo:
        cmd = self.build_command(route)
        logger.debug(f"Querying routing table → {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.error(f"Route query binary not found: {self.vtysh_path}")
            return RouteInfo.missing()
        except subprocess.TimeoutExpired:
            logger.warning(f"Route query timed out after {self.timeout}s")
            return RouteInfo.missing()
        except OSError as e:
            logger.warning(f"Route query failed to start ({type(e).__name__}: {e})")
            return RouteInfo.missing()

        if result.returncode != 0:
            logger.warning(
                f"Route query exited {result.returncode}: {result.stderr.strip() or '(no stderr)'}"
            )
            return RouteInfo.missing()

        try:
            info = parse_route_json(route, result.stdout)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Malformed route query output ({type(e).__name__}: {e})")
            return RouteInfo.missing()

        if info.exists:
            logger.debug(
                f"Route {route} via {info.next_hop or 'connected'} "
                f"age={info.age_seconds}s metric={info.metric}"
            )
        else:
            logger.debug(f"Route {route} not in routing table")
        return info
