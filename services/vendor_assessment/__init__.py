"""
Vendor Assessment Service
=========================

Third-party vendor security questionnaire and review workflow.

Features:
- Vendor registration with invitation tokens
- Weighted compliance scoring (0-100)
- Compliance tier derivation (Compliant/In Progress/Non-Compliant)
- Reviewer validation workflow with vendor notifications
- Proof attachment storage
- Admin dashboard KPIs

Port: 3000
"""

__version__ = "0.1.0"
