"""Naming convention errors."""


class NamingError(Exception):
    """Raised when a naming template cannot be rendered."""
