"""
Authentication module.

Endpoints:
- /auth : sign-in, token refresh, sign-out, current user
"""
