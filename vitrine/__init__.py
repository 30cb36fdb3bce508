"""Client de bureau pour un catalogue de produits avec favoris."""

__version__ = "0.1.0"
