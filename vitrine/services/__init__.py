from vitrine.services.catalog_client import (
    CatalogConnectionError,
    CatalogService,
    CatalogServiceError,
)
from vitrine.services.token_store import TokenStore

__all__ = [
    "CatalogConnectionError",
    "CatalogService",
    "CatalogServiceError",
    "TokenStore",
]
