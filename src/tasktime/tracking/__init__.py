"""
Time accounting.

- event_log.py: append-only session log + freshness marker
- durations.py: interval reconstruction and the whole-snapshot duration cache
"""
