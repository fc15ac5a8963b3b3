from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, ForeignKey
from sqlalchemy.orm import relationship

from lms_admin.model.base import Base, BaseMixin
from lms_admin.model.enums import CommissionStatus


class AffiliateCommission(Base, BaseMixin):
    """Commission earned by an affiliate, withdrawable once released"""

    __tablename__ = "affiliate_commissions"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(precision=10, scale=2), default=Decimal("0.00"), nullable=False)
    status = Column(
        String(20), default=CommissionStatus.PENDING.value, nullable=False, index=True
    )
    available_date = Column(Date, nullable=False)
    released_at = Column(DateTime, nullable=True)

    user = relationship("User")

    def __repr__(self):
        return f"<AffiliateCommission(id={self.id}, status={self.status})>"
