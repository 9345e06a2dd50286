"""
Vendor Assessment Routes
========================

API route handlers for the Vendor Assessment Service.
"""

from services.vendor_assessment.routes import assessments, auth, portal, vendors


__all__ = ["assessments", "auth", "portal", "vendors"]
