"""Tenant resolution, authentication and authorization dependencies."""
