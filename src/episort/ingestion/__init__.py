"""Video discovery for episort libraries."""

from .discovery import VideoScanner
from .models import FileRecord

__all__ = ["FileRecord", "VideoScanner"]
