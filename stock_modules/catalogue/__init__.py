"""Item maintenance (``stock_modules.catalogue``)."""

from stock_modules.catalogue.service import CatalogueService

__all__ = ["CatalogueService"]
