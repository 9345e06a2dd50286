"""
Assessment Database Model
=========================

SQLAlchemy ORM model for submitted questionnaires.

Tier and validation state are stored as plain strings: rows written by
older releases hold localized labels or nulls, which the repository
normalizes on read.

Version: 0.1.0
"""

from datetime import UTC, datetime
import uuid

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from shared.database.postgres import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AssessmentModel(Base):
    """
    SQLAlchemy model for vendor assessments.

    A vendor may hold any number of assessments; the newest one is current.
    """

    __tablename__ = "assessments"
    __table_args__ = (
        Index("ix_assessments_vendor", "vendor_id"),
        Index("ix_assessments_validation_state", "validation_state"),
        Index("ix_assessments_created", "created_at"),
        CheckConstraint("score >= 0 AND score <= 100", name="check_assessment_score"),
    )

    # Primary key
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Vendor relationship
    vendor_id = Column(
        UUID(as_uuid=True),
        ForeignKey("vendors.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Submission
    answers = Column(JSON, nullable=False, default=dict)  # question id -> yes/no/na
    proofs = Column(JSON, nullable=False, default=dict)  # question id -> proof reference

    # Results
    score = Column(Integer, nullable=False, default=0)
    compliance_tier = Column(String(32), nullable=False)

    # Review
    validation_state = Column(String(32))
    reviewer_id = Column(String(255))
    reviewed_at = Column(DateTime(timezone=True))
    comments = Column(Text)
    manual_tier_override = Column(String(32))

    # Audit fields
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Relationships
    vendor = relationship("VendorModel", back_populates="assessments")

    def __repr__(self) -> str:
        return f"<Assessment {self.id}: {self.vendor_id} ({self.validation_state})>"
