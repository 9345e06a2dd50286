"""
Vendor Database Model
=====================

SQLAlchemy ORM model for assessed vendors.

Version: 0.1.0
"""

from datetime import UTC, datetime
import uuid

from sqlalchemy import Column, DateTime, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from shared.database.postgres import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VendorModel(Base):
    """
    SQLAlchemy model for vendors.

    The invitation token is the vendor's only credential on the portal.
    """

    __tablename__ = "vendors"
    __table_args__ = (
        Index("ix_vendors_invite_token", "invite_token", unique=True),
        Index("ix_vendors_created", "created_at"),
    )

    # Primary key
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Identity
    name = Column(String(255), nullable=False)
    contact_email = Column(String(320))

    # Capability token
    invite_token = Column(String(64), nullable=False)

    # Audit fields
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Relationships
    assessments = relationship(
        "AssessmentModel",
        back_populates="vendor",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Vendor {self.id}: {self.name}>"
