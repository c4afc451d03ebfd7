# --- Standard library imports ---
import os
import ipaddress
from pathlib import Path
from dataclasses import dataclass, field

# --- Third-party imports ---
from dotenv import load_dotenv


DEFAULT_STATE_FILE = Path.home() / ".cache" / "route_watch" / "state.json"

# Collaborator defaults: 15s per attempt, 2 retries
DEFAULT_TIMEOUT = 15
DEFAULT_RETRIES = 2


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default

def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")

def _env_str(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


@dataclass(frozen=True)
class SnmpTarget:
    """Where and how SNMP notifications are sent."""
    host: str = "127.0.0.1"
    port: int = 162
    community: str = "public"
    notify_type: str = "trap"   # "trap" or "inform"
    base_oid: str = "1.3.6.1.4.1.99999.2"
    timeout: int = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES

    @property
    def enabled(self) -> bool:
        return bool(self.host)

@dataclass(frozen=True)
class SyslogTarget:
    """Remote syslog collector; an empty host means the local /dev/log socket."""
    host: str = ""
    port: int = 514
    facility: str = "local0"
    tag: str = "route-watch"
    timeout: int = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES

@dataclass(frozen=True)
class WebhookTarget:
    url: str = ""
    timeout: int = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES

    @property
    def enabled(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class Config:
    """
    Operational parameters for one monitor run.

    Built once at process start (see `Config.from_env`) and handed to each
    component; nothing reads the environment after that.
    """

    # --- Watched route ---
    route: str
    expected_next_hop: str = ""
    flap_threshold: int = 300   # seconds

    # --- Persistence ---
    state_file: Path = DEFAULT_STATE_FILE

    # --- Route query ---
    vtysh_path: str = "vtysh"
    query_timeout: int = DEFAULT_TIMEOUT

    # --- Alert channels ---
    snmp: SnmpTarget = field(default_factory=SnmpTarget)
    syslog: SyslogTarget = field(default_factory=SyslogTarget)
    webhook: WebhookTarget = field(default_factory=WebhookTarget)

    # --- Observability ---
    log_level: str = "INFO"
    debug: bool = False

    def __post_init__(self):
        try:
            network = ipaddress.ip_network(self.route, strict=False)
        except ValueError as e:
            raise ValueError(f"WATCH_ROUTE is not a valid CIDR prefix: {self.route!r}") from e

        # Normalise host bits away so lookups match the routing table key
        object.__setattr__(self, "route", str(network))

        if self.flap_threshold < 0:
            raise ValueError(f"FLAP_THRESHOLD must be >= 0, got {self.flap_threshold}")

        if self.snmp.notify_type not in ("trap", "inform"):
            raise ValueError(f"SNMP_NOTIFY_TYPE must be 'trap' or 'inform', got {self.snmp.notify_type!r}")

    @property
    def is_ipv6(self) -> bool:
        return ipaddress.ip_network(self.route).version == 6

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> "Config":
        """
        Load settings from the process environment (and `.env`, if present).

        Raises:
            ValueError: If WATCH_ROUTE is missing or any value fails validation
        """
        load_dotenv(dotenv_path)

        route = _env_str("WATCH_ROUTE")
        if not route:
            raise ValueError("WATCH_ROUTE is not set")

        return cls(
            route=route,
            expected_next_hop=_env_str("EXPECTED_NEXT_HOP"),
            flap_threshold=_env_int("FLAP_THRESHOLD", 300),
            state_file=Path(_env_str("STATE_FILE") or DEFAULT_STATE_FILE).expanduser(),
            vtysh_path=_env_str("VTYSH_PATH", "vtysh"),
            query_timeout=_env_int("QUERY_TIMEOUT", DEFAULT_TIMEOUT),
            snmp=SnmpTarget(
                host=_env_str("SNMP_HOST", "127.0.0.1"),
                port=_env_int("SNMP_PORT", 162),
                community=_env_str("SNMP_COMMUNITY", "public"),
                notify_type=_env_str("SNMP_NOTIFY_TYPE", "trap").lower(),
                base_oid=_env_str("SNMP_BASE_OID", "1.3.6.1.4.1.99999.2"),
                timeout=_env_int("SNMP_TIMEOUT", DEFAULT_TIMEOUT),
                retries=_env_int("SNMP_RETRIES", DEFAULT_RETRIES),
            ),
            syslog=SyslogTarget(
                host=_env_str("SYSLOG_HOST"),
                port=_env_int("SYSLOG_PORT", 514),
                facility=_env_str("SYSLOG_FACILITY", "local0").lower(),
                tag=_env_str("SYSLOG_TAG", "route-watch"),
                timeout=_env_int("SYSLOG_TIMEOUT", DEFAULT_TIMEOUT),
                retries=_env_int("SYSLOG_RETRIES", DEFAULT_RETRIES),
            ),
            webhook=WebhookTarget(
                url=_env_str("WEBHOOK_URL"),
                timeout=_env_int("WEBHOOK_TIMEOUT", DEFAULT_TIMEOUT),
                retries=_env_int("WEBHOOK_RETRIES", DEFAULT_RETRIES),
            ),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            debug=_env_bool("DEBUG"),
        )
