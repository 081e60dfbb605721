"""
Reminder module.

Endpoints:
- /reminders : scheduled notes for patients and appointments
"""
