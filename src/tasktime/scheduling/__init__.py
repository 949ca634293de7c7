"""
Recurring schedules.

- slot_assigner.py: deterministic task -> cron slot mapping with priority displacement
- crontab.py: rendering and marker-scoped installation into the user's crontab
"""
