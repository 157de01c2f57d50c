"""Config validation errors."""
from pos_authz.config.validation.errors import (
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = ["InvalidSettingValueError", "MissingRequiredSettingError"]
