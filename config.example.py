# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKTIME_APP_NAME": "App display name (default: tasktime).",
    "TASKTIME_LOG_LEVEL": "Console log level (default: WARNING); the log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKTIME_DATA_DIR": "Local data directory (default: .local/tasktime).",
    "TASKTIME_TASKS_PATH": "Task table path (default: <data_dir>/tasks.db).",
    "TASKTIME_EVENTS_PATH": "Session event log path (default: <data_dir>/tasks.log).",
    # Notifications
    "TASKTIME_NOTIFY_DESKTOP": "Desktop notifications via notify-send (default: true).",
    "TASKTIME_NOTIFY_EMAIL": "Email notifications via mail (default: false).",
    "TASKTIME_EMAIL_RECIPIENT": "Recipient address for email notifications.",
    "TASKTIME_NOTIFY_MESSAGING": "Messaging webhook notifications (default: false).",
    "TASKTIME_MESSAGING_API_URL": "Incoming-webhook URL (Slack-style JSON {'text': ...}).",
    "TASKTIME_ALERT_THRESHOLD": "Minimum seconds between notifications of the same kind (default: 30).",
    "TASKTIME_QUIET_HOURS_START": "Quiet hours start, HH:MM (default: 22:00).",
    "TASKTIME_QUIET_HOURS_END": "Quiet hours end, HH:MM (default: 06:00).",
    # Accounting / scheduling
    "TASKTIME_PRIORITY_ORDER": "Which priority wins a cron slot: higher_wins (default) or lower_wins.",
    "TASKTIME_DOUBLE_START_POLICY": "start while already running: discard (default), merge or error.",
    "TASKTIME_CRON_MARKER": "Comment tag on generated crontab lines (default: tasktime-managed).",
    "TASKTIME_CRON_COMMAND": "Command template for cron jobs (default: 'tasktime remind {task_id}').",
}
