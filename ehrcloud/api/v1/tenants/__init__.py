"""
Tenants module.

Endpoints:
- /tenants : hospital registration and self-service
"""
