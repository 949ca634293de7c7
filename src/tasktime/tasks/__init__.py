"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, Recurrence, TaskField, SessionEvent)
- task_store.py: plain-text task table with atomic rewrites
- task_api.py: session lifecycle (start/pause/resume/end), reminders, reports, scheduling
"""
