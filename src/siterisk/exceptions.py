"""Exceptions and warnings raised by siterisk."""


class SiteRiskError(Exception):
    """Base exception for siterisk runtime errors."""


class ConfigurationError(SiteRiskError):
    """Raised when scoring weights or the category table are invalid."""


class InputError(SiteRiskError):
    """Raised when the input export cannot be found or parsed."""


class MalformedRowWarning(UserWarning):
    """Issued when a scoring field is present but cannot be coerced.

    The offending value is replaced by the rule's safe default and the row
    is still scored.
    """
