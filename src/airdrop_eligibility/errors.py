"""Exception types raised by the eligibility engine."""


class AirdropEligibilityError(Exception):
    """Base class for all package errors."""


class ConfigurationError(AirdropEligibilityError):
    """
    Raised for configuration-class failures.

    Covers an empty project catalog and unreadable or malformed
    configuration files. Never retried internally.

    """
