"""
Session notifications.

- quiet_hours.py: time-of-day suppression window
- throttle.py: per-category minimum interval
- notifier.py: gate + fan-out
- transports.py: desktop / email / webhook delivery
"""
