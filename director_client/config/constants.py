"""
Director client constants.

Centralized constants for headers, timeouts and other magic values.
"""

# Headers
CONTEXT_ID_HEADER = "X-Bosh-Context-Id"
CONTENT_TYPE_JSON = "application/json"

# HTTP timeouts (seconds)
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 60.0

# Task polling (seconds)
DEFAULT_TASK_POLL_INTERVAL = 0.5
DEFAULT_TASK_MAX_WAIT = 3600.0  # 1 hour

# Streaming
DEFAULT_DOWNLOAD_CHUNK_SIZE = 64 * 1024  # 64 KB

# Error messages
MAX_ERROR_BODY_LENGTH = 1_000  # Response body characters kept in error messages

# Environment
ENV_PREFIX = "DIRECTOR_"
LOG_ENV_PREFIX = "DIRECTOR_LOG_"

# Logging
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_DIR = "~/.director_client/logs"
