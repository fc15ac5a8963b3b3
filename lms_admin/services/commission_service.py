import logging
from datetime import date
from typing import Optional

from lms_admin.repositories.commission_repo import CommissionRepository

logger = logging.getLogger(__name__)


class CommissionService:
    """Affiliate commission bookkeeping run outside of requests"""

    def __init__(self, commission_repository: CommissionRepository):
        self._commission_repository = commission_repository

    async def release_due_commissions(self, today: Optional[date] = None) -> int:
        """
        Make pending commissions available once their available date is
        reached.

        Args:
            today: Reference date, defaults to the current date

        Returns:
            Number of commissions released
        """
        today = today or date.today()
        try:
            released = await self._commission_repository.release_due(today)
        except Exception:
            await self._commission_repository.rollback()
            logger.exception("CommissionService --> release_due_commissions")
            raise

        logger.info(f"Released {released} affiliate commissions due by {today.isoformat()}")
        return released
