"""Naming convention rendering for episort."""

from .errors import NamingError
from .formatter import NameFormatter, sanitize_filename

__all__ = ["NameFormatter", "NamingError", "sanitize_filename"]
