"""
Doctor module.

Endpoints:
- /doctors : clinical profiles of the hospital's physicians
"""
