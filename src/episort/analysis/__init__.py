"""File classification for episort."""

from .analyzer import SpecialFolderMatcher, StateAnalyzer
from .models import AnalysisResult, ClassifiedFile

__all__ = ["AnalysisResult", "ClassifiedFile", "SpecialFolderMatcher", "StateAnalyzer"]
