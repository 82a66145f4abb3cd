# api/executor.py
"""
Client for the remote JDoodle execution API.

Sends a normalized unit and returns the executor's report. Failures are split
in two: the executor rejecting the submission with a structured error body
(RemoteCompilationError) and everything else (RemoteTransportError).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

import requests


class RemoteCompilationError(Exception):
    """The executor answered with a structured error for the submitted unit."""

    def __init__(self, details: Dict[str, Any], status: Optional[int] = None):
        super().__init__(details.get("error") or f"executor returned HTTP {status}")
        self.details = details
        self.status = status


class RemoteTransportError(Exception):
    """Timeout, connection failure or a malformed executor response."""


@dataclass
class ExecutionOutcome:
    status_code: Optional[int]
    output: Optional[str]
    cpu_time: Any = None
    memory: Any = None
    raw: Dict[str, Any] = field(default_factory=dict)


def is_successful(outcome: ExecutionOutcome, failure_markers: Iterable[str]) -> bool:
    """
    The executor reports 200 for runs that never started (e.g. no main class),
    so the output is also checked for known failure markers (case-insensitive).
    """
    if outcome.status_code != 200:
        return False
    output = (outcome.output or "").lower()
    return not any(marker.lower() in output for marker in failure_markers if marker)


class JDoodleClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        url: str,
        language: str = "kotlin",
        version_index: str = "0",
        timeout: float = 15.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.url = url
        self.language = language
        self.version_index = version_index
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "JDoodleClient":
        return cls(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            url=settings.executor_url,
            language=settings.language,
            version_index=settings.version_index,
            timeout=settings.request_timeout,
        )

    def execute(self, script: str) -> ExecutionOutcome:
        """
        Submit `script` once; no retries. Expects a JSON body with keys
        statusCode, output, cpuTime, memory.
        """
        payload = {
            "script": script,
            "language": self.language,
            "versionIndex": self.version_index,
            "clientId": self.client_id,
            "clientSecret": self.client_secret,
        }
        try:
            resp = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteTransportError(f"executor request failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.ok:
            # only a 4xx is about the submitted unit; a 5xx is an outage
            if resp.status_code < 500 and isinstance(body, dict) and body:
                raise RemoteCompilationError(body, status=resp.status_code)
            raise RemoteTransportError(f"executor returned HTTP {resp.status_code}")

        if not isinstance(body, dict):
            raise RemoteTransportError("executor returned a malformed response")

        status = body.get("statusCode")
        try:
            status = int(status) if status is not None else None
        except (TypeError, ValueError):
            raise RemoteTransportError(f"executor returned a malformed status code: {status!r}") from None

        output = body.get("output")
        if output is not None and not isinstance(output, str):
            raise RemoteTransportError(f"executor returned a malformed output: {type(output).__name__}")

        return ExecutionOutcome(
            status_code=status,
            output=output,
            cpu_time=body.get("cpuTime"),
            memory=body.get("memory"),
            raw=body,
        )
