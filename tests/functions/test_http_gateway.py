import json

import httpx
import pytest

from trackly.core.exceptions import GatewayError
from trackly.functions.gateway import HttpFunctionGateway, get_jira_issues
from trackly.notifications.sender import GatewayPushSender


def gateway_for(handler):
    return HttpFunctionGateway("https://functions.example.test/", transport=httpx.MockTransport(handler))


def test_invoke_posts_payload_and_unwraps_result():
    calls = []

    def handler(request):
        calls.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"result": [{"key": "TRK-1"}]})

    assert get_jira_issues(gateway_for(handler)) == [{"key": "TRK-1"}]
    assert calls == [("/getJiraIssues", {"data": {}})]


def test_push_sender_goes_through_the_gateway():
    calls = []

    def handler(request):
        calls.append(json.loads(request.content)["data"])
        return httpx.Response(200, json={"result": None})

    GatewayPushSender(gateway_for(handler)).send(token="t", title="Trackly", body="hi")

    assert calls == [{"token": "t", "title": "Trackly", "body": "hi"}]


@pytest.mark.parametrize(
    "response",
    [httpx.Response(500, text="oops"), httpx.Response(200, json={"error": "quota"}), httpx.Response(200, text="<html>")],
)
def test_failures_become_gateway_errors(response):
    with pytest.raises(GatewayError):
        gateway_for(lambda request: response).invoke("getJiraIssues")


def test_unconfigured_gateway_fails_fast():
    with pytest.raises(GatewayError):
        HttpFunctionGateway("").invoke("sendPush", {})
