# --- Standard library imports ---
import asyncio

# --- Third-party imports ---
from pysnmp.hlapi.v3arch.asyncio import (
    send_notification,
    SnmpEngine,
    CommunityData,
    UdpTransportTarget,
    ContextData,
    NotificationType,
    ObjectIdentity,
    ObjectType,
)
from pysnmp.proto.rfc1902 import Integer32, OctetString

# --- Project imports ---
from .alerts import Alert
from .config import SnmpTarget
from .logger import get_logger


logger = get_logger("snmp_trap")

class SnmpDeliveryError(RuntimeError):
    """The SNMP engine reported an error indication or error status."""


class SnmpTrapChannel:
    """
    Sends route status transitions as SNMPv2c notifications.

    OID layout under the configured base:
        <base>.0.<trap_type>   notification (1=missing, 2=flapping, 3=recovered)
        <base>.1.1             trap type       (Integer32)
        <base>.1.2             route           (OctetString)
        <base>.1.3             next hop        (OctetString)
        <base>.1.4             severity        (OctetString)
        <base>.1.5             age in seconds  (Integer32, only when known)
    """

    name = "snmp"

    def __init__(self, target: SnmpTarget):
        self.target = target

    def notification_oid(self, alert: Alert) -> str:
        return f"{self.target.base_oid}.0.{alert.kind.trap_type}"

    def build_varbinds(self, alert: Alert) -> list[ObjectType]:
        base = self.target.base_oid
        varbinds = [
            ObjectType(ObjectIdentity(f"{base}.1.1"), Integer32(alert.kind.trap_type)),
            ObjectType(ObjectIdentity(f"{base}.1.2"), OctetString(alert.route)),
            ObjectType(ObjectIdentity(f"{base}.1.3"), OctetString(alert.next_hop)),
            ObjectType(ObjectIdentity(f"{base}.1.4"), OctetString(alert.severity.syslog_name)),
        ]
        if alert.age_seconds is not None:
            varbinds.append(
                ObjectType(ObjectIdentity(f"{base}.1.5"), Integer32(alert.age_seconds))
            )
        return varbinds

    async def _send(self, alert: Alert) -> None:
        engine = SnmpEngine()
        try:
            transport = await UdpTransportTarget.create(
                (self.target.host, self.target.port),
                timeout=self.target.timeout,
                retries=self.target.retries,
            )
            notification = NotificationType(
                ObjectIdentity(self.notification_oid(alert))
            ).add_varbinds(*self.build_varbinds(alert))

            error_indication, error_status, error_index, _ = await send_notification(
                engine,
                CommunityData(self.target.community),
                transport,
                ContextData(),
                self.target.notify_type,
                notification,
            )
        finally:
            engine.close_dispatcher()

        if error_indication:
            raise SnmpDeliveryError(str(error_indication))
        if error_status:
            raise SnmpDeliveryError(f"{error_status.prettyPrint()} at {error_index}")

    def send(self, alert: Alert) -> None:
        """
        Deliver one notification.

        Raises:
            SnmpDeliveryError: If the engine reports a delivery error
        """
        logger.debug(
            f"Sending SNMP {self.target.notify_type} {self.notification_oid(alert)} "
            f"→ {self.target.host}:{self.target.port}"
        )
        asyncio.run(self._send(alert))
