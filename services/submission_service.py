"""
Submission Service
==================
Sends the completed intake answers to the external scoring service and keeps
the last response in the result slot.

A failed submission is a soft failure: the previous result is cleared so a
stale report is never shown, the failure is logged, and the caller carries
on to the results page, which then reports that nothing could be calculated.
"""

import json
import logging
import urllib.error
import urllib.request
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from calculator_models import FormAnswers
from scoring_result import BackendResult
from services.persistence import PersistencePort

logger = logging.getLogger(__name__)


def iso_timestamp(now: datetime) -> str:
    """UTC timestamp with millisecond precision and a trailing Z."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_payload(answers: FormAnswers, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Answers (camelCase) plus totalBudget and submittedAt."""
    payload = answers.to_dict()
    total = answers.total_budget
    payload["totalBudget"] = int(total) if float(total).is_integer() else total
    payload["submittedAt"] = iso_timestamp(now or datetime.now(timezone.utc))
    return payload


class SubmissionClient:
    """
    Client for the scoring endpoint.

    Args:
        endpoint: Scoring URL (POST, JSON in and out)
        result_port: Slot for the last scoring response
        timeout: Seconds before the request is abandoned; None waits indefinitely
        opener: urlopen-compatible callable, injectable for tests
    """

    def __init__(
        self,
        endpoint: str,
        result_port: PersistencePort,
        timeout: Optional[float] = 30,
        opener: Callable[..., Any] = urllib.request.urlopen,
    ):
        self.endpoint = endpoint
        self.result_port = result_port
        self.timeout = timeout
        self.opener = opener

    def submit(self, answers: FormAnswers, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        POST the answers once. Never raises.

        Returns:
            The payload that was sent
        """
        payload = build_payload(answers, now)
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        request = urllib.request.Request(
            self.endpoint,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )

        try:
            with self._open(request) as resp:
                status = getattr(resp, "status", None)
                if isinstance(status, int) and not 200 <= status < 300:
                    raise urllib.error.HTTPError(self.endpoint, status, "Non-success status", None, None)
                raw = resp.read().decode("utf-8")
            data = json.loads(raw)
        except urllib.error.HTTPError as e:
            logger.warning("Scoring service returned HTTP %s", e.code)
            self.clear_result()
            return payload
        except (OSError, ValueError) as e:
            # URLError, timeouts and undecodable bodies
            logger.warning("Scoring request failed: %s", e)
            self.clear_result()
            return payload

        try:
            self.result_port.save(json.dumps(data, ensure_ascii=False))
        except OSError as e:
            logger.error("Could not store scoring result: %s", e)
            self.clear_result()
            return payload
        logger.info("Scoring result stored (%d bytes)", len(raw))
        return payload

    def _open(self, request: urllib.request.Request) -> Any:
        if self.timeout is None:
            return self.opener(request)
        return self.opener(request, timeout=self.timeout)

    def load_result(self) -> Optional[BackendResult]:
        """Last stored scoring response, or None when absent or unreadable."""
        try:
            text = self.result_port.load()
        except OSError as e:
            logger.warning("Could not read stored result: %s", e)
            return None
        if not text:
            return None
        try:
            raw = json.loads(text)
        except ValueError:
            logger.warning("Stored result is not valid JSON; ignoring it")
            return None
        return BackendResult.parse(raw)

    def clear_result(self) -> None:
        try:
            self.result_port.clear()
        except OSError as e:
            logger.warning("Could not clear stored result: %s", e)
