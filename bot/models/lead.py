import datetime
from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import mapped_column, Mapped

from lead_engine.models import Lead
from .base import Base


class LeadRecord(Base):
    __tablename__ = 'leads'
    __table_args__ = (
        UniqueConstraint("user_id", "business_name", "email", name="uq_lead_user_business_email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    business_type: Mapped[str] = mapped_column(String(20), default="local_service")
    niche_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Contact info
    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state_province: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Social handles
    instagram_handle: Mapped[str | None] = mapped_column(String(255), nullable=True)
    facebook_page: Mapped[str | None] = mapped_column(String(255), nullable=True)
    linkedin_profile: Mapped[str | None] = mapped_column(String(255), nullable=True)
    twitter_handle: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # E-commerce enrichment
    monthly_revenue_estimate: Mapped[float | None] = mapped_column(Float, nullable=True)
    follower_count_instagram: Mapped[int | None] = mapped_column(Integer, nullable=True)
    engagement_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    ad_spend_estimate: Mapped[float | None] = mapped_column(Float, nullable=True)
    shopify_detected: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    # Cached result of lead_engine.scoring; recomputed on every view
    lead_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Outreach status: new / pending / contacted / skipped
    outreach_status: Mapped[str] = mapped_column(String(20), default="new")

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=datetime.datetime.now)

    def to_lead(self) -> Lead:
        """Immutable engine view of this row."""
        return Lead(
            id=str(self.id),
            business_type=self.business_type or "local_service",
            business_name=self.business_name,
            owner_name=self.owner_name,
            phone=self.phone,
            email=self.email,
            website=self.website,
            city=self.city,
            state_province=self.state_province,
            niche_name=self.niche_name,
            instagram_handle=self.instagram_handle,
            facebook_page=self.facebook_page,
            linkedin_profile=self.linkedin_profile,
            twitter_handle=self.twitter_handle,
            monthly_revenue_estimate=self.monthly_revenue_estimate,
            follower_count_instagram=self.follower_count_instagram,
            engagement_rate=self.engagement_rate,
            ad_spend_estimate=self.ad_spend_estimate,
            shopify_detected=self.shopify_detected,
            lead_score=self.lead_score,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<LeadRecord(id={self.id}, business='{self.business_name}', score={self.lead_score})>"
