# --- Third-party imports ---
import requests

# --- Project imports ---
from .alerts import Alert
from .config import WebhookTarget
from .logger import get_logger


class WebhookChannel:
    """
    Posts alerts as JSON to an HTTP endpoint (chat bridge, incident tool, ...).
    """

    name = "webhook"

    def __init__(self, target: WebhookTarget):
        self.logger = get_logger("webhook")
        self.target = target
        self.headers = {"Content-Type": "application/json"}

    def send(self, alert: Alert) -> None:
        """
        POST the alert, retrying transport and HTTP errors.

        Raises:
            RuntimeError: If every attempt fails
        """
        attempts = max(self.target.retries, 0) + 1
        payload = alert.as_dict()

        for attempt in range(1, attempts + 1):
            try:
                resp = requests.post(
                    self.target.url,
                    headers=self.headers,
                    json=payload,
                    timeout=self.target.timeout,
                )
                resp.raise_for_status()
                self.logger.debug(f"Webhook accepted alert (HTTP {resp.status_code})")
                return
            except requests.RequestException as e:
                self.logger.debug(
                    f"Webhook attempt {attempt}/{attempts} failed ({e.__class__.__name__})"
                )
                last_error = e

        raise RuntimeError(
            f"Webhook POST to {self.target.url} failed after {attempts} attempts"
        ) from last_error
