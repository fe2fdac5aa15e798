# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep machine-specific values in .env (gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "POMO_APP_NAME": "App display name (default: pomotrack).",
    "POMO_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "POMO_DATA_DIR": "Local data directory, also holds pomotrack.log (default: .local/pomotrack).",
    "POMO_DB_PATH": "SQLite database path (default: <data_dir>/pomodoro.sqlite3).",
    "POMO_TIMER_STATE_PATH": "Persisted console timer state (default: <data_dir>/timer_state.json).",
    # REST API
    "POMO_API_ENABLED": "Serve the REST API (true/false, default: true).",
    "POMO_API_HOST": "Bind address (default: 127.0.0.1).",
    "POMO_API_PORT": "Bind port (default: 8000).",
    # Console / timer
    "POMO_CONSOLE_ENABLED": "Run the console REPL with the local timer (true/false, default: false).",
    "POMO_TIMER_POLL_SECONDS": "How often the local timer checks for a finished countdown (default: 1.0).",
}
