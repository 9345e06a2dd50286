"""
Vendor Assessment Database Models
=================================

SQLAlchemy ORM models for vendors and their assessments.

Tables:
- vendors: Third parties invited to the questionnaire
- assessments: Submitted questionnaires with score and review state

Version: 0.1.0
"""

from services.vendor_assessment.models.assessment import AssessmentModel
from services.vendor_assessment.models.vendor import VendorModel

__all__ = [
    "VendorModel",
    "AssessmentModel",
]
