"""Plan construction errors."""


class PlanError(Exception):
    """Raised when an operation plan cannot be assembled."""


class VersionResolutionError(PlanError):
    """Raised when a duplicate group cannot be versioned safely."""
