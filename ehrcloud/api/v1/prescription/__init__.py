"""
Prescription module.

Endpoints:
- /prescriptions : medication orders written by doctors
"""
