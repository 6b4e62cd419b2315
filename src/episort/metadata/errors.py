"""Metadata source errors."""


class MetadataError(Exception):
    """Raised when episode metadata cannot be retrieved or decoded."""
