"""Structures de données partagées entre la couche UI et le contrôleur."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from vitrine.models import Favorite, Product, User


@dataclass(frozen=True, slots=True)
class StateSnapshot:
    """Vue figée de l'état, transmise à l'interface après chaque opération."""

    authenticated_user: User | None
    products: tuple[Product, ...]
    favorites: tuple[Favorite, ...]
    login_error: str | None
    register_error: str | None
    catalog_error: str | None
    presenting_login_form: bool

    @property
    def is_authenticated(self) -> bool:
        return bool(self.authenticated_user and self.authenticated_user.get("id"))

    def favorite_for(self, product_id: Any) -> Favorite | None:
        return _find_favorite(self.favorites, product_id)


@dataclass(slots=True)
class AppState:
    """État interne de l'application."""

    authenticated_user: User | None = None
    products: list[Product] = field(default_factory=list)
    favorites: list[Favorite] = field(default_factory=list)
    login_error: str | None = None
    register_error: str | None = None
    products_error: str | None = None
    favorites_error: str | None = None
    presenting_login_form: bool = False

    @property
    def is_authenticated(self) -> bool:
        """Retourne True si un utilisateur avec un identifiant est connecté."""
        return bool(self.authenticated_user and self.authenticated_user.get("id"))

    @property
    def catalog_error(self) -> str | None:
        """Message du bandeau : un message par chargement en échec."""
        messages = [message for message in (self.products_error, self.favorites_error) if message]
        return " ".join(messages) or None

    @property
    def user_id(self) -> Any:
        return self.authenticated_user.get("id") if self.authenticated_user else None

    def set_products(self, products: Iterable[Product]) -> None:
        self.products = list(products)

    def set_favorites(self, favorites: Iterable[Favorite]) -> None:
        self.favorites = list(favorites)

    def clear_favorites(self) -> None:
        self.favorites = []

    def favorite_for(self, product_id: Any) -> Favorite | None:
        """Retourne le favori associé au produit, s'il existe."""
        return _find_favorite(self.favorites, product_id)

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            authenticated_user=dict(self.authenticated_user) if self.authenticated_user else None,
            products=tuple(self.products),
            favorites=tuple(self.favorites),
            login_error=self.login_error,
            register_error=self.register_error,
            catalog_error=self.catalog_error,
            presenting_login_form=self.presenting_login_form,
        )


def _find_favorite(favorites: Iterable[Favorite], product_id: Any) -> Favorite | None:
    return next(
        (favorite for favorite in favorites if favorite.get("product_id") == product_id),
        None,
    )
