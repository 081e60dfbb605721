"""
Patient module.

Endpoints:
- /patients : patient records of the current hospital
"""
