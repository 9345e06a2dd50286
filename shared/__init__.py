"""
VendorShield Shared Library
===========================

Common utilities, configurations, and abstractions shared across VendorShield services.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - auth: JWT authentication and authorization
    - database: PostgreSQL client
    - models: Shared Pydantic models and vocabulary
    - storage: Proof attachment storage backends
    - notifications: Vendor notification dispatch

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "VendorShield Team"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
