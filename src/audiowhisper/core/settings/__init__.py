"""Settings and persistence utilities."""

from .credentials import EnvironmentCredentialStore
from .settings import Settings, get_config_dir, get_data_dir, get_settings

__all__ = [
    "EnvironmentCredentialStore",
    "Settings",
    "get_config_dir",
    "get_data_dir",
    "get_settings",
]
