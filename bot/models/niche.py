from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import mapped_column, Mapped

from .base import Base


class Niche(Base):
    """Catalog entry a user can generate leads for."""

    __tablename__ = "lead_niches"
    __table_args__ = (
        UniqueConstraint("name", "category", name="uq_niche_name_category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Business type the niche belongs to: ecommerce / local_service
    category: Mapped[str] = mapped_column(String(20), nullable=False)

    def __repr__(self) -> str:
        return f"<Niche(id={self.id}, name='{self.name}', category='{self.category}')>"
