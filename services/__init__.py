"""
VendorShield Services
=====================

Services of the VendorShield vendor risk platform.

Services:
- vendor_assessment: Security questionnaires, compliance scoring and reviewer validation
"""

__all__ = [
    "vendor_assessment",
]
