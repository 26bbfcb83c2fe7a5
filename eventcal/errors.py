"""Exception taxonomy for eventcal.

Both errors are raised before any occurrence generation or document
formatting starts, so callers never receive partial output.
"""


class EventCalError(Exception):
    """Base class for all eventcal errors."""


class ValidationError(EventCalError, ValueError):
    """Input is missing a required field or is semantically invalid."""


class ConfigurationError(EventCalError, ValueError):
    """Unsupported option (unknown frequency, provider) or malformed settings."""
