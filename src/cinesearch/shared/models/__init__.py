"""Shared data models."""

from .catalog import CatalogItem, RemotePage, ScoredItem

__all__ = ["CatalogItem", "RemotePage", "ScoredItem"]
