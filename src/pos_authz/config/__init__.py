"""Config – 12-factor settings and loaders."""

from pos_authz.config.settings import AuthzSettings, EnvSettingsLoader, Settings, SettingsLoader
from pos_authz.config.validation import InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "AuthzSettings",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
