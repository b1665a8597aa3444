class LiberateError(Exception):
    """Base exception for liberate-case errors."""


class LiberateSettingsError(LiberateError):
    """Raised when liberate-case settings are invalid."""
