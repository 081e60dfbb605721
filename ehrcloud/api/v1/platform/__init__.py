"""
Platform module.

Endpoints:
- /platform : super admin management of hospitals and subscription plans
"""
