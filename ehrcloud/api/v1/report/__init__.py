"""
Report module.

Endpoints:
- /reports : medical and operational reports
"""
