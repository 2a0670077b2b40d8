# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Mailer client: hands composed emails to the delivery service.

Two paths: ``bulk`` (one message, many addresses) and ``individual``
(per-recipient context, personalised downstream).
"""

from typing import Any

import httpx

from missionhub.core.config import settings
from missionhub.core.logging import get_logger

logger = get_logger(__name__)


class MailerClient:
    """Fire-and-forget; delivery retries are the mailer's concern."""

    def queue_bulk(self, message: dict[str, Any], recipients: list[str]) -> None:
        self._post("bulk", {"message": message, "recipients": recipients})

    def queue_individual(self, message: dict[str, Any], recipients: list[dict[str, Any]]) -> None:
        self._post("individual", {"message": message, "recipients": recipients})

    def _post(self, path: str, payload: dict[str, Any]) -> None:
        try:
            with httpx.Client(timeout=settings.HTTP_TIMEOUT) as client:
                resp = client.post(f"{settings.MAILER_SERVICE_URL}/api/v1/mailings/{path}", json=payload)
            logger.info(
                "Mailing queued: path=%s, recipients=%d, status=%d",
                path, len(payload["recipients"]), resp.status_code,
            )
        except Exception as exc:
            logger.warning("Mailer service unreachable: %s", exc)
