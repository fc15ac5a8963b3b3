from datetime import date, datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from lms_admin.model.affiliate_models import AffiliateCommission
from lms_admin.model.enums import CommissionStatus
from lms_admin.repositories.base_repo import BaseRepository


class CommissionRepository(BaseRepository[AffiliateCommission]):
    """
    Repository for affiliate commissions
    """

    def __init__(self, session: AsyncSession):
        super().__init__(AffiliateCommission, session)

    async def release_due(self, today: date) -> int:
        """
        Mark pending commissions whose available date has been reached as
        available.

        Args:
            today: Release everything available on or before this date

        Returns:
            Number of commissions released
        """
        return await self.bulk_update(
            [
                AffiliateCommission.status == CommissionStatus.PENDING.value,
                AffiliateCommission.available_date <= today,
            ],
            {
                "status": CommissionStatus.AVAILABLE.value,
                "released_at": datetime.now(timezone.utc).replace(tzinfo=None),
            },
        )
