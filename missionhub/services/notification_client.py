# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Notification client: participant-directed notices
(``joined_mission``, ``mission_role_approved``) via notification-service.
"""

import httpx

from missionhub.core.config import settings
from missionhub.core.logging import get_logger
from missionhub.metrics import NOTIFICATIONS_SENT
from missionhub.models.domain import Participation

logger = get_logger(__name__)

NOTIFICATION_KINDS = ("joined_mission", "mission_role_approved")


class NotificationClient:
    """Fire-and-forget sender. Failures are logged but never raised."""

    def notify(self, kind: str, participation: Participation) -> None:
        user = participation.user
        recipient = user.email if user else ""
        try:
            with httpx.Client(timeout=settings.HTTP_TIMEOUT) as client:
                resp = client.post(
                    f"{settings.NOTIFICATION_SERVICE_URL}/api/v1/notify",
                    json={
                        "kind": kind,
                        "recipient": recipient,
                        "participation": participation.model_dump(mode="json"),
                        "mission": participation.mission.name if participation.mission else None,
                    },
                )
            NOTIFICATIONS_SENT.labels(kind=kind).inc()
            logger.info(
                "Notification sent: kind=%s, participation=%s, recipient=%s, status=%d",
                kind, participation.id, recipient, resp.status_code,
            )
        except Exception as exc:
            logger.warning("Notification failed: kind=%s, error=%s", kind, exc)
