"""
Submission Service

Sends a finished round to the receiving backend.

The entry core never talks to the network itself: the route layer
builds the payload from the session, hands it to this client, and
reports the outcome back with RoundSession.mark_submitted().
A failed attempt leaves the session untouched, so retrying is safe.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..domain.errors import SubmissionFailure
from ..domain.round import SubmissionPayload

logger = logging.getLogger(__name__)


# Empty URL means demo mode: nothing is sent and success is simulated
SUBMIT_URL = os.environ.get("SHOTLOG_SUBMIT_URL", "")
SUBMIT_TIMEOUT = float(os.environ.get("SHOTLOG_SUBMIT_TIMEOUT", "10"))


@dataclass
class SubmissionResult:
    """What the core needs to know about a submission attempt."""
    ok: bool
    round_id: Optional[str] = None
    error: Optional[str] = None
    shots_inserted: Optional[int] = None


class SubmissionClient:
    """
    Posts {round, shots, replaceExisting} as JSON.

    The receiving side answers {"ok": true, "roundId": ...} or
    {"ok": false, "error": ...}.

    Usage:
        client = SubmissionClient.from_env()
        result = client.submit(session.build_submission_payload())
        if result.ok:
            session.mark_submitted(result.round_id)
    """

    def __init__(self, url: str = "", timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "SubmissionClient":
        return cls(url=SUBMIT_URL, timeout=SUBMIT_TIMEOUT)

    @property
    def demo_mode(self) -> bool:
        return not self.url

    def submit(self, payload: SubmissionPayload) -> SubmissionResult:
        """
        Send the round.

        Returns:
            SubmissionResult; ok=False when the backend rejected the round

        Raises:
            SubmissionFailure: If the backend could not be reached or
                answered with something that isn't a result
        """
        body = payload.to_dict()

        if self.demo_mode:
            logger.info(
                f"Demo mode - would submit round {payload.round.round_id} "
                f"with {len(payload.shots)} shots"
            )
            return SubmissionResult(
                ok=True,
                round_id=payload.round.round_id,
                shots_inserted=len(payload.shots),
            )

        try:
            response = requests.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Submission of round {payload.round.round_id} failed: {e}")
            raise SubmissionFailure("Network error. Please try again.") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Submission response was not JSON (HTTP {response.status_code})")
            raise SubmissionFailure("Unexpected response from server") from e

        if not isinstance(data, dict):
            raise SubmissionFailure("Unexpected response from server")

        if data.get("ok"):
            logger.info(f"Round {payload.round.round_id} accepted as {data.get('roundId')}")
            return SubmissionResult(
                ok=True,
                round_id=data.get("roundId"),
                shots_inserted=data.get("shotsInserted"),
            )

        error = data.get("error") or "Failed to submit round"
        logger.warning(f"Round {payload.round.round_id} rejected: {error}")
        return SubmissionResult(ok=False, error=error)
