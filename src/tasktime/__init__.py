"""tasktime: work-session tracking and cron scheduling for recurring tasks."""

__version__ = "0.1.0"
