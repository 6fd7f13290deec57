"""
Chatbot message quota ledger
"""
from quranpro.config.logger import logger
from quranpro.database import DatabaseManager, QuotaStatus, User
from quranpro.exceptions import NotFound, ValidationError


class QuotaService:
    """Per-user message counters.

    The chat flow checks the quota before calling the completion service and
    increments it only after both messages are stored. Check and increment are
    separate statements, so two concurrent requests at ``quota - 1`` can both
    pass the check; the increment itself is a single atomic add and never
    loses an update.
    """

    def __init__(self, db: DatabaseManager):
        self.db = db

    def check_quota(self, user: User) -> QuotaStatus:
        counters = self.db.get_quota_counters(user.id)
        if user.is_admin:
            used = counters["used"] if counters else 0
            return QuotaStatus(can_send=True, remaining=None, used=used, quota=None, unlimited=True)

        if not counters:
            return QuotaStatus(can_send=False, remaining=0, used=0, quota=0)

        used, quota = counters["used"], counters["quota"]
        return QuotaStatus(
            can_send=used < quota,
            remaining=max(quota - used, 0),
            used=used,
            quota=quota,
        )

    def increment(self, user_id: str):
        """Add one to messages_used; an unknown user is a no-op"""
        if self.db.increment_messages_used(user_id) == 0:
            logger.warning("quota_increment_missing_user", extra={"user_id": user_id})

    def reset(self, user_id: str):
        if not self.db.reset_messages_used(user_id):
            raise NotFound("User not found")
        logger.info("quota_reset", extra={"user_id": user_id})

    def set_quota(self, user_id: str, quota: int):
        if quota is None or quota < 1:
            raise ValidationError("Quota must be a positive integer")
        if not self.db.set_messages_quota(user_id, quota):
            raise NotFound("User not found")
        logger.info("quota_updated", extra={"user_id": user_id, "quota": quota})
