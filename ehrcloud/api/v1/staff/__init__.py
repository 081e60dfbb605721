"""
Staff module.

Endpoints:
- /staff : employee profiles and their sign-in accounts
"""
