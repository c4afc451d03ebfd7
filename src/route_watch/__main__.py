# --- Standard library imports ---
import sys

# --- Project imports ---
from .config import Config
from .logger import get_logger, setup_logging, resolve_level
from .alerts import AlertDispatcher
from .monitor import MonitorCycle
from .snmp_trap import SnmpTrapChannel
from .state_store import StateStore
from .syslog_channel import SyslogChannel
from .telemetry import cycle_summary
from .time_service import TimeService
from .route_query import VtyshRouteProvider
from .webhook import WebhookChannel


def build_channels(config: Config) -> list:
    """Instantiate every enabled alert channel, in delivery order."""
    channels = []
    if config.snmp.enabled:
        channels.append(SnmpTrapChannel(config.snmp))
    channels.append(SyslogChannel(config.syslog))
    if config.webhook.enabled:
        channels.append(WebhookChannel(config.webhook))
    return channels

def run_once(config: Config) -> int:
    """
    Wire the components from `config` and run a single monitor cycle.

    Returns:
        0 when the cycle completed or was skipped because another run
        holds the state lock
    """
    logger = get_logger("main")
    time_service = TimeService()
    store = StateStore(config.state_file, clock=time_service.now_epoch)

    with store.locked() as acquired:
        if not acquired:
            logger.warning(f"Another run holds {store.lock_path}; skipping this cycle")
            return 0

        cycle = MonitorCycle(
            config=config,
            provider=VtyshRouteProvider(
                vtysh_path=config.vtysh_path,
                timeout=config.query_timeout,
                ipv6=config.is_ipv6,
            ),
            store=store,
            dispatcher=AlertDispatcher(build_channels(config)),
            time_service=time_service,
        )
        report = cycle.run()

    if config.debug:
        print(cycle_summary(report, time_service))

    return 0

def main() -> int:
    """
    Entry point: one monitoring cycle per invocation.

    Exit code is non-zero only when an unexpected error escapes the cycle.
    """
    setup_logging()
    logger = get_logger("main")

    try:
        config = Config.from_env()
        setup_logging(level=resolve_level(config.log_level))
        logger.debug(f"Python version: {sys.version}")
        logger.info(f"🚀 Watching {config.route} (flap threshold {config.flap_threshold}s)")
        return run_once(config)
    except Exception as e:
        logger.critical(f"Unrecoverable cycle failure ({type(e).__name__}: {e})", exc_info=True)
        return 1

if __name__ == "__main__":
    sys.exit(main())
