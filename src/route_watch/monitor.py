# --- Standard library imports ---
import logging
from typing import Protocol
from dataclasses import dataclass, field

# --- Project imports ---
from .config import Config
from .logger import NOTICE, get_logger
from .telemetry import tlog
from .classifier import classify
from .state_store import StateStore
from .time_service import TimeService
from .alerts import AlertDispatcher, DeliveryResult, build_alert
from .models import AlertKind, MonitorState, RouteInfo, Status, STATUS_EMOJI


class RouteInfoProvider(Protocol):
    def query(self, route: str) -> RouteInfo: ...


def decide_alert(prior: Status, current: Status) -> AlertKind | None:
    """
    Decide which alert, if any, a status transition warrants.

    Only the immediately previous status is considered, so a burst of flaps
    inside one polling interval yields at most one alert per edge crossed.
    """
    if current == prior:
        return None

    match current:
        case Status.MISSING:
            return AlertKind.MISSING
        case Status.FLAPPING:
            return AlertKind.FLAPPING
        case Status.STABLE if prior in (Status.MISSING, Status.FLAPPING):
            return AlertKind.RECOVERED
        case _:
            # UNKNOWN → STABLE: first observation sets the baseline
            return None


@dataclass
class CycleReport:
    """Everything one cycle saw and decided."""
    route: str
    threshold: int
    info: RouteInfo
    prior: MonitorState
    current: Status
    checked_at: int
    alert: AlertKind | None = None
    deliveries: list[DeliveryResult] = field(default_factory=list)
    saved: bool = False


class MonitorCycle:
    """
    One pass of the route monitor.

    Workflow:
    1. Look up the watched route
    2. Classify it (MISSING / FLAPPING / STABLE)
    3. Compare with the persisted status of the previous run
    4. Dispatch an alert when the transition warrants one
    5. Persist the new status, every cycle
    """

    def __init__(
        self,
        config: Config,
        provider: RouteInfoProvider,
        store: StateStore,
        dispatcher: AlertDispatcher,
        time_service: TimeService | None = None,
    ):
        self.config = config
        self.provider = provider
        self.store = store
        self.dispatcher = dispatcher
        self.time = time_service or TimeService()
        self.logger = get_logger("monitor")

    def run(self) -> CycleReport:
        route = self.config.route
        threshold = self.config.flap_threshold
        checked_at = self.time.now_epoch()

        # --- PHASE 1: Observe ---
        info = self.provider.query(route)
        current = classify(info, threshold)
        prior = self.store.load()

        report = CycleReport(
            route=route,
            threshold=threshold,
            info=info,
            prior=prior,
            current=current,
            checked_at=checked_at,
        )

        # --- PHASE 2: Compare & alert ---
        report.alert = decide_alert(prior.last_status, current)

        if report.alert is not None:
            tlog(self.logger, STATUS_EMOJI[current], "ROUTE", f"{prior.last_status} → {current}", route)
            alert = build_alert(report.alert, route, info)
            report.deliveries = self.dispatcher.dispatch(alert)
        elif current == prior.last_status:
            tlog(self.logger, STATUS_EMOJI[current], "ROUTE", f"still {current}", route,
                 meta=self._meta(info), level=logging.DEBUG)
        else:
            tlog(self.logger, STATUS_EMOJI[current], "ROUTE", f"baseline {current}", route,
                 meta=self._meta(info), level=NOTICE)

        self._check_next_hop(info, current)

        # --- PHASE 3: Persist (unconditional) ---
        report.saved = self.store.save(current)
        return report

    @staticmethod
    def _meta(info: RouteInfo) -> str | None:
        if not info.exists:
            return None
        return f"age={info.age_seconds}s via {info.next_hop or 'connected'}"

    def _check_next_hop(self, info: RouteInfo, current: Status) -> None:
        """Warn when a stable route resolves through an unexpected next hop."""
        expected = self.config.expected_next_hop
        if not expected or current != Status.STABLE:
            return
        if info.next_hop != expected:
            self.logger.warning(
                f"Next hop drift on {self.config.route}: "
                f"expected {expected}, found {info.next_hop or 'connected'}"
            )
