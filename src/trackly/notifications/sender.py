from __future__ import annotations

from typing import Protocol

from ..functions.gateway import FunctionGateway

PUSH_TITLE = "Trackly"


class PushSender(Protocol):
    def send(self, *, token: str, title: str, body: str) -> None:
        raise NotImplementedError


class GatewayPushSender(PushSender):
    """Delivers pushes through the ``sendPush`` remote function."""

    def __init__(self, gateway: FunctionGateway):
        self._gateway = gateway

    def send(self, *, token: str, title: str, body: str) -> None:
        self._gateway.invoke("sendPush", {"token": token, "title": title, "body": body})
