import datetime
from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import mapped_column, Mapped, relationship

from .base import Base
from .niche import Niche


class WeeklyUsage(Base):
    """Generation counter for one user and one Monday-to-Monday window."""

    __tablename__ = "user_usage"
    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_usage_user_week"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    week_start: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    generation_count: Mapped[int] = mapped_column(Integer, default=0)
    leads_generated: Mapped[int] = mapped_column(Integer, default=0)
    last_generation_at: Mapped[datetime.datetime | None] = mapped_column(DateTime, nullable=True)


class NicheUsage(Base):
    __tablename__ = "user_niche_usage"
    __table_args__ = (
        UniqueConstraint("user_id", "niche_id", name="uq_niche_usage_user_niche"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    niche_id: Mapped[int] = mapped_column(
        ForeignKey("lead_niches.id", ondelete="CASCADE"), nullable=False
    )
    last_used_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    leads_generated: Mapped[int] = mapped_column(Integer, default=0)

    niche: Mapped[Niche] = relationship(Niche)
