"""
Vendor Models
=============

Models for third-party vendors being assessed.

Version: 0.1.0
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.models.assessment import AssessmentSummary, ComplianceTier, ValidationState


class VendorCreate(BaseModel):
    """Request model for creating a vendor."""

    name: str = Field(..., min_length=1, max_length=255)
    contact_email: str = Field(..., min_length=3, max_length=320)

    @field_validator("name", "contact_email")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Reject values that are only whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class Vendor(BaseModel):
    """Full vendor model."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Unique vendor ID")
    name: str
    contact_email: str | None = None
    invite_token: str = Field(..., description="Invitation capability token")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class VendorSummary(BaseModel):
    """Vendor row on the dashboard, with its latest assessment."""

    id: str
    name: str
    contact_email: str | None
    invite_token: str
    score: int = 0
    compliance_tier: ComplianceTier = ComplianceTier.IN_PROGRESS
    compliance_label: str
    validation_state: ValidationState | None = None
    latest_assessment_at: datetime | None = None


class VendorDetail(BaseModel):
    """Vendor with its assessment history, newest first."""

    vendor: Vendor
    assessments: list[AssessmentSummary] = Field(default_factory=list)


class DashboardKPIs(BaseModel):
    """Aggregate figures for the admin overview."""

    total_vendors: int = 0
    compliant_count: int = 0
    in_progress_count: int = 0
    non_compliant_count: int = 0
    compliant_percentage: int = 0
    pending_count: int = 0
    average_compliance_days: int = 0


class Dashboard(BaseModel):
    """Admin dashboard payload."""

    vendors: list[VendorSummary] = Field(default_factory=list)
    kpis: DashboardKPIs = Field(default_factory=DashboardKPIs)
