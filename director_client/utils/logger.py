"""
Centralized logging for director_client.

Provides:
- Configurable log levels and rotation
- Correlation ids on every record logged while a scoped request runs
- Sensitive data redaction

Settings come from the "logging" object of ~/.director_client/config.json
and DIRECTOR_LOG_* variables (see config/loader.py).
"""
import json
import os
import sys
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any, ContextManager, Optional

from loguru import logger

from director_client.utils.security import redact_sensitive_info

if TYPE_CHECKING:
    from director_client.config.models import LogSettings


def use_emoji_logs() -> bool:
    """
    Check if emoji prefixes should be used in log messages.

    Returns True unless USE_EMOJI_LOGS environment variable is set to "0" or "false".
    """
    value = os.environ.get("USE_EMOJI_LOGS", "1").lower()
    return value not in ("0", "false", "no", "off")


_EMOJI_TO_ASCII = {
    "🌐": "[REQUEST]",
    "⏳": "[TASK]",
    "⏱️": "[TIMEOUT]",
    "⚠️": "[WARN]",
    "✅": "[OK]",
    "❌": "[ERROR]",
    "🛑": "[CANCEL]",
    "📥": "[DOWNLOAD]",
}


def log_prefix(emoji: str) -> str:
    """
    Return the appropriate log prefix based on USE_EMOJI_LOGS setting.

    Args:
        emoji: The emoji to use when emoji logs are enabled.

    Returns:
        The emoji if USE_EMOJI_LOGS is enabled, otherwise the ASCII equivalent
        (or empty string if no mapping exists).
    """
    if use_emoji_logs():
        return emoji
    return _EMOJI_TO_ASCII.get(emoji, "")


def _redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_sensitive_info(value)
    if isinstance(value, dict):
        return {k: _redact_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_redact_value(item) for item in value)
    return value


def redaction_filter(record) -> None:
    """Redact sensitive info from every record (loguru patcher)."""
    record["message"] = redact_sensitive_info(record["message"])
    for key in list(record["extra"].keys()):
        record["extra"][key] = _redact_value(record["extra"][key])


def setup_logger(
    verbose: bool = False,
    context_id: Optional[str] = None,
    config: Optional["LogSettings"] = None,
) -> None:
    """
    Configure the logger.

    Rules:
    1. FILE: Always log to the configured log file (rotated).
    2. CONSOLE: Log to stderr when verbose (DEBUG+) or console_enabled.

    Args:
        verbose: Enable console logging at DEBUG
        context_id: Optional correlation id added to every record
        config: Log settings (default: load_log_settings())
    """
    logger.remove()

    if config is None:
        # config.loader logs through this module
        from director_client.config.loader import load_log_settings
        config = load_log_settings()

    log_path = config.log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    def format_record(record):
        """Format log record with optional context_id."""
        cid = record["extra"].get("context_id", "") or context_id or ""

        if config.json_logs:
            log_entry = {
                "timestamp": record["time"].isoformat(),
                "level": record["level"].name,
                "message": record["message"],
                "module": record["name"],
                "function": record["function"],
                "line": record["line"],
            }
            if cid:
                log_entry["context_id"] = cid
            # Escape braces: loguru formats the returned string again
            return json.dumps(log_entry).replace("{", "{{").replace("}", "}}") + "\n"

        prefix = "{time:YYYY-MM-DD HH:mm:ss} | "
        if cid:
            prefix += cid.replace("{", "{{").replace("}", "}}") + " | "
        if config.include_caller:
            return prefix + "{level: <8} | {name}:{function}:{line} - {message}\n{exception}"
        return prefix + "{level: <8} | {message}\n{exception}"

    logger.add(
        log_path,
        rotation=config.rotation,
        retention=config.retention,
        level=config.file_level,
        format=format_record,
        compression=config.compression,
        enqueue=True,
    )

    if verbose or config.console_enabled:
        console_format = (
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        )
        logger.add(
            sys.stderr,
            format=console_format,
            level="DEBUG" if verbose else config.console_level,
            colorize=True,
        )

    logger.configure(patcher=redaction_filter)


def context_scope(context_id: Optional[str]) -> ContextManager:
    """
    Tag every record logged inside the block with ``context_id``.

    No-op when ``context_id`` is empty.

    Example:
        >>> with context_scope("abc"):
        ...     logger.info("Cleaning up resources")
    """
    if not context_id:
        return nullcontext()
    return logger.contextualize(context_id=context_id)


__all__ = [
    "context_scope",
    "log_prefix",
    "logger",
    "redaction_filter",
    "setup_logger",
    "use_emoji_logs",
]
