"""Errors raised while setting up the analyzer."""


class RlsLinterError(Exception):
    """Base class for rlslinter errors."""


class RuleRegistryError(RlsLinterError):
    """The rule registry is unreadable, incomplete or ambiguous."""


class ConfigurationError(RlsLinterError):
    """A configuration value makes the analyzer unusable."""
