"""
Director client config - Configuration management.
"""

from director_client.config.loader import CONFIG_FILE, load_director_config, load_log_settings
from director_client.config.models import DirectorConfig, LogSettings

__all__ = [
    "CONFIG_FILE",
    "DirectorConfig",
    "LogSettings",
    "load_director_config",
    "load_log_settings",
]
