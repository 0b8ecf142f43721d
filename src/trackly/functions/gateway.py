"""HTTP client for the remote callable functions (Jira lookup, push, mail)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from ..core.exceptions import GatewayError

logger = logging.getLogger(__name__)


class FunctionGateway(Protocol):
    def invoke(self, name: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        raise NotImplementedError


class HttpFunctionGateway(FunctionGateway):
    """POSTs ``{"data": payload}`` to ``<base_url>/<name>`` and unwraps ``result``."""

    def __init__(self, base_url: str, *, timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None):
        self.base = (base_url or "").rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self.headers = {"Accept": "application/json", "Content-Type": "application/json"}

    def invoke(self, name: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        if not self.base:
            raise GatewayError("Function gateway is not configured")
        url = f"{self.base}/{name}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                r = client.post(url, json={"data": payload or {}}, headers=self.headers)
                r.raise_for_status()
                body = r.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Function %s returned HTTP %s", name, e.response.status_code)
            raise GatewayError(f"Function {name} failed with HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Function %s could not be reached: %s", name, e)
            raise GatewayError(f"Function {name} could not be reached") from e

        if isinstance(body, dict) and "error" in body:
            raise GatewayError(str(body["error"]))
        return body.get("result") if isinstance(body, dict) else body


def get_jira_issues(gateway: FunctionGateway) -> List[Dict[str, Any]]:
    return list(gateway.invoke("getJiraIssues") or [])


def send_hours_report(gateway: FunctionGateway, *, user_id: int, month: str) -> None:
    gateway.invoke("sendHoursReport", {"userId": user_id, "month": month})
