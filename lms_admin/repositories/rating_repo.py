"""
Rating Repository - ratings and their polymorphic rateable targets
"""
from typing import Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lms_admin.model.course_models import Course
from lms_admin.model.enums import RateableType
from lms_admin.model.rating_models import Rating
from lms_admin.model.user_models import User
from lms_admin.repositories.base_repo import BaseRepository

# Type tag stored in ratings.rateable_type -> model it points at
RATEABLE_MODELS = {
    RateableType.COURSE: Course,
    RateableType.INSTRUCTOR: User,
}


class RatingRepository(BaseRepository[Rating]):
    """
    Repository for Rating entity
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Rating, session)

    async def rate(
            self,
            user_id: int,
            rateable_type: RateableType,
            rateable_id: int,
            rating: float,
            review: Optional[str] = None,
    ) -> Rating:
        """
        Store a rating written by ``user_id`` for a rateable entity.
        """
        return await self.create({
            "user_id": user_id,
            "rateable_type": rateable_type.value,
            "rateable_id": rateable_id,
            "rating": rating,
            "review": review,
        })

    async def get_for_rateable(
            self,
            rateable_type: RateableType,
            rateable_id: int,
    ) -> Sequence[Rating]:
        """
        Ratings of one entity, newest first, with their authors loaded.
        """
        query = (
            select(Rating)
            .options(selectinload(Rating.user))
            .where(Rating.rateable_type == rateable_type.value)
            .where(Rating.rateable_id == rateable_id)
            .order_by(Rating.id.desc())
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_rateable(self, rating: Rating):
        """
        Resolve the entity a rating belongs to.

        Returns:
            Course or User instance, or None when the target no longer exists
        """
        model = RATEABLE_MODELS[RateableType(rating.rateable_type)]
        return await self.session.get(model, rating.rateable_id)

    async def average_for(self, rateable_type: RateableType, rateable_id: int) -> float:
        query = (
            select(func.avg(Rating.rating))
            .where(Rating.rateable_type == rateable_type.value)
            .where(Rating.rateable_id == rateable_id)
        )
        result = await self.session.execute(query)
        return float(result.scalar() or 0.0)
