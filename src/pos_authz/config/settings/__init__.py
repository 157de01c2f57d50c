"""Config settings – 12-factor env-based configuration."""
from pos_authz.config.settings.base import Settings
from pos_authz.config.settings.loaders import EnvSettingsLoader, SettingsLoader
from pos_authz.config.settings.authz import AuthzSettings

__all__ = ["AuthzSettings", "EnvSettingsLoader", "Settings", "SettingsLoader"]
