"""
Controller / orchestrator for compile requests.

Admits the request (rate limit, validation), normalizes the snippet, submits
it to the remote executor and maps the outcome to a (body, status) pair for
the HTTP layer. Compile failures reported by the executor are not HTTP errors.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from api.executor import (
    JDoodleClient,
    RemoteCompilationError,
    RemoteTransportError,
    is_successful,
)
from api.normalizer import WrapStyle, normalize
from api.ratelimit import RateLimiter
from api.validation import validate_submission
from api.config import DEFAULT_FAILURE_MARKERS

logger = logging.getLogger(__name__)

NO_OUTPUT = "No output"
RATE_LIMIT_MESSAGE = "Too many requests. Try again in an hour."
COMPILATION_FAILED_MESSAGE = "Compilation failed"
INTERNAL_ERROR_MESSAGE = "Internal server error"
NOT_AN_OBJECT_MESSAGE = "Request body must be a JSON object."

Response = Tuple[Dict[str, Any], int]


class CompileRelay:
    def __init__(
        self,
        client: JDoodleClient,
        limiter: Optional[RateLimiter] = None,
        wrap_style: WrapStyle = WrapStyle.FUNCTION,
        failure_markers: Iterable[str] = DEFAULT_FAILURE_MARKERS,
        expose_errors: bool = False,
    ):
        self.client = client
        self.limiter = limiter or RateLimiter()
        self.wrap_style = wrap_style
        self.failure_markers = tuple(failure_markers)
        # include exception text in 500 bodies (development only)
        self.expose_errors = expose_errors

    @classmethod
    def from_settings(cls, settings, limiter: Optional[RateLimiter] = None) -> "CompileRelay":
        return cls(
            client=JDoodleClient.from_settings(settings),
            limiter=limiter,
            wrap_style=settings.wrap_style,
            failure_markers=settings.failure_markers,
            expose_errors=settings.debug,
        )

    def _internal_error(self, exc: Exception) -> Response:
        body = {"success": False, "error": INTERNAL_ERROR_MESSAGE}
        if self.expose_errors:
            body["debug"] = str(exc)
        return body, 500

    def _admit(self, caller_id: str) -> Optional[Response]:
        if not self.limiter.hit(caller_id):
            logger.warning("Rate limit exceeded for %s", caller_id)
            return {"success": False, "error": RATE_LIMIT_MESSAGE}, 429
        return None

    def handle_payload(self, payload, caller_id: str) -> Response:
        """
        Entry point for a decoded request body. Admission runs first, so a body
        that is not a JSON object still counts against the caller's quota.
        """
        rejected = self._admit(caller_id)
        if rejected is not None:
            return rejected
        if payload is not None and not isinstance(payload, dict):
            logger.warning("Rejected non-object body from %s", caller_id)
            return {"success": False, "error": NOT_AN_OBJECT_MESSAGE}, 400
        return self._compile((payload or {}).get("code"), caller_id)

    def handle_compile(self, code, caller_id: str) -> Response:
        """
        Admission runs before validation, so rejected submissions still count
        against the caller's quota.
        """
        rejected = self._admit(caller_id)
        if rejected is not None:
            return rejected
        return self._compile(code, caller_id)

    def _compile(self, code, caller_id: str) -> Response:
        ok, err = validate_submission(code)
        if not ok:
            logger.warning("Rejected submission from %s: %s", caller_id, err)
            return {"success": False, "error": err}, 400

        script = normalize(code, self.wrap_style)

        try:
            outcome = self.client.execute(script)
        except RemoteCompilationError as e:
            logger.warning("Executor rejected submission from %s: %s", caller_id, e)
            return {"success": False, "error": COMPILATION_FAILED_MESSAGE, "details": e.details}, 400
        except RemoteTransportError as e:
            logger.error("Executor unavailable: %s", e)
            return self._internal_error(e)
        except Exception as e:
            logger.exception("Unexpected error while compiling")
            return self._internal_error(e)

        return {
            "success": is_successful(outcome, self.failure_markers),
            "output": outcome.output or NO_OUTPUT,
            "statusCode": outcome.status_code,
            "cpuTime": outcome.cpu_time,
            "memory": outcome.memory,
        }, 200
