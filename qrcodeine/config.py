"""Configuration from the environment."""

import os


# Backends used when the caller does not inject one
GENERATOR = os.getenv("QRCODEINE_GENERATOR", "segno")
SERIALIZER = os.getenv("QRCODEINE_SERIALIZER", "pypng")

# Logging (read by the CLI)
LOG_LEVEL = os.getenv("QRCODEINE_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("QRCODEINE_LOG_FILE") or None
LOG_JSON = os.getenv("QRCODEINE_LOG_JSON", "").lower() in ("1", "true", "yes")
