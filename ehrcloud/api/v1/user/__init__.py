"""
User module.

Endpoints:
- /users : hospital accounts (hospital owner)
"""
