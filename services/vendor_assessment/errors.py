"""
Service Errors
==============

Exceptions raised by the vendor assessment core. Each maps to one HTTP
status in ``main.py``; business errors are raised before any mutation.

Version: 0.1.0
"""


class VendorAssessmentError(Exception):
    """Base class for service errors."""

    status_code = 500


class NotFoundError(VendorAssessmentError):
    """Referenced vendor, assessment or proof does not exist."""

    status_code = 404


class InvalidInputError(VendorAssessmentError):
    """Client input rejected before any state change."""

    status_code = 400


class InfrastructureUnavailableError(VendorAssessmentError):
    """Storage or another collaborator could not be reached."""

    status_code = 503
