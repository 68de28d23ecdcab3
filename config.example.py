# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
Durations are seconds.
"""

ENV_VARS = {
    # App / logging
    "SMARTCONN_APP_NAME": "App display name (default: smart-connection).",
    "SMARTCONN_LOG_LEVEL": "Console logging level (default: INFO).",
    "SMARTCONN_LOG_DIR": "Directory for smart_connection.log (default: .local/smart_connection).",
    # Polling
    "SMARTCONN_ENABLE_SMART_POLLING": "Adaptive polling on (true) or fixed-interval fallback (false).",
    "SMARTCONN_BASE_POLL_INTERVAL": "Default base interval for new tasks (default: 30).",
    "SMARTCONN_MAX_POLL_INTERVAL": "Default interval cap for new tasks (default: 60).",
    "SMARTCONN_ACTIVITY_TIMEOUT": "Seconds without interaction before the user counts as idle (default: 300).",
    "SMARTCONN_BACKOFF_FACTOR": "Interval multiplier after repeated no-change polls (default: 1.5).",
    "SMARTCONN_NO_CHANGE_THRESHOLD": "No-change polls tolerated before backing off (default: 3).",
    "SMARTCONN_TRANSPORT_WIDEN_FACTOR": "Base interval multiple used while push is connected (default: 3).",
    # Connectors
    "SMARTCONN_CONSOLE_ENABLED": "Run the interactive console simulator (true/false).",
}
