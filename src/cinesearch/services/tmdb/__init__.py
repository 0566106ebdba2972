"""TMDB remote catalog adapter."""

from .catalog_source import TMDBCatalogSource, to_catalog_record

__all__ = ["TMDBCatalogSource", "to_catalog_record"]
