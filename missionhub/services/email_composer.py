# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Admin email composition: validation, audience resolution and
hand-off to the bulk or individual delivery path.
"""

from typing import Any, Dict, Iterator, List, Tuple

from missionhub.core.logging import get_logger
from missionhub.metrics import EMAIL_RECIPIENTS, EMAILS_DISPATCHED, VALIDATION_FAILURES
from missionhub.models.coercion import is_blank
from missionhub.models.domain import User
from missionhub.models.email import SCOPE_VALUES, EmailMessage
from missionhub.repositories.user_repository import UserRepository
from missionhub.services.mailer_client import MailerClient
from missionhub.services.participation_service import ParticipationService

logger = get_logger(__name__)

CONTENT_REQUIRED = "at least one content section must be filled in"


class EmailComposer:
    """Validates and dispatches admin mailings. Nothing is persisted."""

    def __init__(
        self,
        user_repo: UserRepository,
        participation_service: ParticipationService,
        mailer: MailerClient,
    ) -> None:
        self._users = user_repo
        self._participations = participation_service
        self._mailer = mailer

    # ── Audience ──

    def user_ids(self, message: EmailMessage) -> List[int]:
        if message.participation_scoped:
            f = message.filter
            return self._participations.user_ids_matching(
                mission_id=f.mission_id, role=f.role, states=f.states, pickups=f.pickups,
            )
        return self._users.all_ids()

    def user_count(self, message: EmailMessage) -> int:
        return len(self.user_ids(message))

    def users(self, message: EmailMessage) -> List[User]:
        return self._users.get_many(self.user_ids(message))

    def emails(self, message: EmailMessage) -> List[str]:
        seen: List[str] = []
        for user in self.users(message):
            if user.email not in seen:
                seen.append(user.email)
        return seen

    def each_user_with_scope(self, message: EmailMessage) -> Iterator[Tuple[User, Dict[str, Any]]]:
        """Yield each recipient with the context used for personalisation."""
        mission_id = message.filter.mission_id
        for user in self.users(message):
            scope: Dict[str, Any] = {"user": user}
            if message.participation_scoped and mission_id is not None:
                scope["participation"] = self._participations.find_for_user(user.id, mission_id)
            yield user, scope

    # ── Validation ──

    def validate(self, message: EmailMessage) -> bool:
        errors = message.errors
        errors.clear()
        if is_blank(message.subject):
            errors.add("subject", "blank", "can't be blank")
        if message.scope_type not in SCOPE_VALUES:
            errors.add("scope_type", "inclusion", "is not included in the list")
        if is_blank(message.html_content) and is_blank(message.text_content):
            errors.add("html_content", "content_required", CONTENT_REQUIRED)
            errors.add("text_content", "content_required", CONTENT_REQUIRED)
        if self.user_count(message) < 1:
            errors.add_to_base("There must be at least one user", code="no_recipients")
        if not message.confirmed:
            errors.add("confirmed", "unconfirmed", "please confirm the email choice to continue")
        return errors.empty

    def valid_other_than_confirmed(self, message: EmailMessage) -> bool:
        self.validate(message)
        return message.errors.fields == ["confirmed"]

    # ── Dispatch ──

    def save(self, message: EmailMessage) -> bool:
        if not self.validate(message):
            VALIDATION_FAILURES.labels(entity="email").inc()
            logger.info("Email rejected errors=%s", message.errors.full_messages())
            return False
        self.send(message)
        return True

    def send(self, message: EmailMessage) -> str:
        """Choose the delivery path by sniffing for template placeholders."""
        payload = message.model_dump(mode="json")
        logger.debug("Dispatching email %s", message.model_dump_json())
        if message.uses_template:
            delivery = "individual"
            recipients = [self._recipient_context(scope) for _, scope in self.each_user_with_scope(message)]
            self._mailer.queue_individual(payload, recipients)
        else:
            delivery = "bulk"
            recipients = self.emails(message)
            self._mailer.queue_bulk(payload, recipients)
        message._delivery = delivery
        EMAILS_DISPATCHED.labels(delivery=delivery).inc()
        EMAIL_RECIPIENTS.observe(len(recipients))
        logger.info("Email dispatched delivery=%s recipients=%d", delivery, len(recipients),
                    extra={"delivery": delivery, "mission_id": message.filter.mission_id})
        return delivery

    @staticmethod
    def _recipient_context(scope: Dict[str, Any]) -> Dict[str, Any]:
        context: Dict[str, Any] = {
            "user": scope["user"].model_dump(mode="json", include={"id", "name", "email"}),
        }
        if "participation" in scope:
            participation = scope["participation"]
            context["participation"] = (
                participation.model_dump(mode="json") if participation is not None else None
            )
        return context
