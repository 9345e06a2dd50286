"""
VendorShield Test Suite
=======================

Test organization:
- tests/unit/          - Shared library tests (auth, storage, notifications)
- tests/services/      - Service tests against in-memory fakes

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Shared library only
    pytest tests/services           # Vendor assessment service only
"""
