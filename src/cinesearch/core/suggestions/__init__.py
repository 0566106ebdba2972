"""Debounced autosuggestions."""

from .debouncer import Debouncer
from .engine import SuggestionEngine, SuggestionState
from .trending import TrendingKeywordProvider

__all__ = ["Debouncer", "SuggestionEngine", "SuggestionState", "TrendingKeywordProvider"]
