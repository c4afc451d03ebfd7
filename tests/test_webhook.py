import json

import pytest
import requests
import responses
from unittest.mock import patch

from route_watch.alerts import build_alert
from route_watch.config import WebhookTarget
from route_watch.models import AlertKind, RouteInfo
from route_watch.webhook import WebhookChannel


HOOK_URL = "https://hooks.example.net/noc/route-watch"
ROUTE = "10.20.0.0/16"


# ==============================
# TEST GROUP: Webhook Delivery
# ==============================
# Function: WebhookChannel.send()
# -------------------------------
@responses.activate
def test_send_posts_alert_json():
    """Alert is POSTed once as JSON"""
    responses.add(responses.POST, HOOK_URL, status=204)
    alert = build_alert(AlertKind.FLAPPING, ROUTE, RouteInfo(True, 5, "192.0.2.1", 20))

    WebhookChannel(WebhookTarget(url=HOOK_URL)).send(alert)

    assert len(responses.calls) == 1
    body = json.loads(responses.calls[0].request.body)
    assert body["kind"] == "FLAPPING"
    assert body["route"] == ROUTE
    assert body["severity"] == "warning"

@pytest.mark.parametrize(
    "statuses, expected_calls, should_raise",
    [
        # ✅ First attempt accepted
        ([200], 1, False),

        # ✅ Transient 502 then accepted
        ([502, 200], 2, False),

        # ❌ Every attempt rejected (1 try + 2 retries)
        ([500, 500, 500], 3, True),

        # ❌ Auth failure is retried too, then surfaced
        ([403, 403, 403], 3, True),
    ],
)

@responses.activate
def test_send_retries(statuses, expected_calls, should_raise):
    for status in statuses:
        responses.add(responses.POST, HOOK_URL, status=status)
    channel = WebhookChannel(WebhookTarget(url=HOOK_URL, retries=2))
    alert = build_alert(AlertKind.MISSING, ROUTE, RouteInfo.missing())

    if should_raise:
        with pytest.raises(RuntimeError):
            channel.send(alert)
    else:
        channel.send(alert)

    assert len(responses.calls) == expected_calls


@patch("route_watch.webhook.requests.post", side_effect=requests.exceptions.ConnectTimeout("Boom"))
def test_send_connection_failure(mock_post):
    """Network failure on every attempt → RuntimeError chained to the cause"""
    channel = WebhookChannel(WebhookTarget(url=HOOK_URL, timeout=3, retries=1))
    alert = build_alert(AlertKind.MISSING, ROUTE, RouteInfo.missing())

    with pytest.raises(RuntimeError) as excinfo:
        channel.send(alert)

    assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectTimeout)
    assert mock_post.call_count == 2
    assert mock_post.call_args.kwargs["timeout"] == 3
