"""
Console commands. Each opens its own database session because it runs
outside of a request, from the CLI or the scheduler.
"""
import logging
from datetime import date
from typing import Optional

from lms_admin.config import get_settings
from lms_admin.db.session import AsyncSessionLocal
from lms_admin.repositories.commission_repo import CommissionRepository
from lms_admin.repositories.role_repo import RoleRepository
from lms_admin.services.commission_service import CommissionService
from lms_admin.services.role_service import RoleService

logger = logging.getLogger(__name__)

RELEASE_COMMISSIONS = "affiliate:release-commissions"
SEED_ROLES = "roles:seed"
SCHEDULE_WORK = "schedule:work"


async def release_commissions(today: Optional[date] = None) -> int:
    """Release pending affiliate commissions whose available date has come"""
    async with AsyncSessionLocal() as session:
        service = CommissionService(CommissionRepository(session))
        return await service.release_due_commissions(today)


async def seed_roles() -> dict[str, list[str]]:
    async with AsyncSessionLocal() as session:
        service = RoleService(RoleRepository(session), get_settings())
        return await service.seed_system_roles()
