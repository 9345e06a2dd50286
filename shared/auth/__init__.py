"""
Authentication Module
=====================

JWT-based authentication for VendorShield reviewers.

Vendors never log in: they hold an invitation token that is checked by the
portal routes. Reviewers authenticate against the configured admin account
and receive a bearer token.

Usage:
    from shared.auth import authenticate_reviewer, create_token_pair, require_reviewer

    if authenticate_reviewer(username, password):
        tokens = create_token_pair({"sub": username, "roles": ["admin"]})

    @app.post("/assessments/{id}/approve")
    async def approve(user: User = Depends(require_reviewer)):
        ...
"""

from shared.auth.dependencies import (
    User,
    get_current_user,
    oauth2_scheme,
    require_reviewer,
    require_roles,
)
from shared.auth.jwt import (
    TokenData,
    TokenPair,
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
)
from shared.auth.password import authenticate_reviewer, hash_password, verify_password

__all__ = [
    # JWT
    "create_access_token",
    "create_refresh_token",
    "create_token_pair",
    "decode_token",
    "TokenData",
    "TokenPair",
    # Password
    "authenticate_reviewer",
    "hash_password",
    "verify_password",
    # Dependencies
    "User",
    "get_current_user",
    "require_roles",
    "require_reviewer",
    "oauth2_scheme",
]
