"""
Appointment module.

Endpoints:
- /appointments : booking and lifecycle (Scheduled, Confirmed, Completed, Cancelled, No-Show)
"""
