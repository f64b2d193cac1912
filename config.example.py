# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use .env for machine-specific values; it is gitignored.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PLANNER_APP_NAME": "App display name (default: study-planner).",
    "PLANNER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Storage
    "PLANNER_STORAGE_BACKEND": "Blob store backend: sqlite | json | memory (default: sqlite).",
    "PLANNER_DATA_DIR": "Local data directory, also holds planner.log (default: .local/study_planner).",
    "PLANNER_DB_PATH": "SQLite key-value file (default: <data_dir>/planner.sqlite3).",
    "PLANNER_JSON_PATH": "JSON key-value file (default: <data_dir>/planner.json).",
    # Reminders
    "PLANNER_REMINDER_WINDOW_MINUTES": "Look-ahead window for reminder alerts in minutes (default: 5).",
}
