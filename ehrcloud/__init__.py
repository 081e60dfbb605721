"""EHR Cloud - multi-tenant electronic health record backend."""

__version__ = "1.0.0"
