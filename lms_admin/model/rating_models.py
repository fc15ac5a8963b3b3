"""
Ratings attach to any rateable entity through a type tag and id pair.
"""

from sqlalchemy import Column, Float, Text, String, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship

from lms_admin.model.base import Base, BaseMixin


class Rating(Base, BaseMixin):
    __tablename__ = "ratings"
    __table_args__ = (Index("ix_ratings_rateable", "rateable_type", "rateable_id"),)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Float, nullable=False)
    review = Column(Text, nullable=True)
    rateable_type = Column(String(50), nullable=False)
    rateable_id = Column(Integer, nullable=False)

    # Author of the rating
    user = relationship("User")

    def __repr__(self):
        return (
            f"<Rating(id={self.id}, rateable={self.rateable_type}:{self.rateable_id}, "
            f"rating={self.rating})>"
        )
