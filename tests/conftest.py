"""Fixtures partagées : faux client d'API et stockage de jeton temporaire."""

from __future__ import annotations

import pytest

from vitrine.controller import SessionController
from vitrine.services import CatalogServiceError, TokenStore

PRODUCTS = [
    {"id": 1, "name": "Kettle"},
    {"id": 2, "name": "Teapot"},
    {"id": 3, "name": "Mug"},
]


class FakeCatalogService:
    """Remplace CatalogService et enregistre chaque appel."""

    def __init__(self):
        self.calls = []
        self.login_result = "t1"
        self.register_result = {"id": 7, "username": "ann"}
        self.identities = {"t1": {"id": 7, "username": "ann"}}
        self.identity_error = None
        self.products_result = [dict(product) for product in PRODUCTS]
        self.favorites_result = [{"id": 11, "product_id": 2, "user_id": 7}]
        self.add_error = None
        self.remove_error = None
        self._next_favorite_id = 100

    @staticmethod
    def _resolve(result):
        if isinstance(result, Exception):
            raise result
        return result

    def login(self, credentials):
        self.calls.append(("login", credentials.username, credentials.password))
        return self._resolve(self.login_result)

    def register(self, credentials):
        self.calls.append(("register", credentials.username, credentials.password))
        return self._resolve(self.register_result)

    def current_user(self, token):
        self.calls.append(("me", token))
        if self.identity_error is not None:
            raise self.identity_error
        if token not in self.identities:
            raise CatalogServiceError(
                "GET /auth/me a échoué (401).",
                status_code=401,
                payload={"error": "not authorized"},
            )
        return dict(self.identities[token])

    def list_products(self):
        self.calls.append(("products",))
        return self._resolve(self.products_result)

    def list_favorites(self, user_id, token):
        self.calls.append(("favorites", user_id, token))
        result = self._resolve(self.favorites_result)
        return [dict(favorite) for favorite in result]

    def add_favorite(self, user_id, product_id, token):
        self.calls.append(("add_favorite", user_id, product_id, token))
        if self.add_error is not None:
            raise self.add_error
        self._next_favorite_id += 1
        return {"id": self._next_favorite_id, "product_id": product_id, "user_id": user_id}

    def remove_favorite(self, user_id, favorite_id, token):
        self.calls.append(("remove_favorite", user_id, favorite_id, token))
        if self.remove_error is not None:
            raise self.remove_error


@pytest.fixture
def service():
    return FakeCatalogService()


@pytest.fixture
def tokens(tmp_path):
    return TokenStore(tmp_path / "session" / "token.json")


@pytest.fixture
def controller(service, tokens):
    return SessionController(service=service, tokens=tokens)


@pytest.fixture
def signed_in(controller, service, tokens):
    """Contrôleur avec une session restaurée depuis le jeton ``t1``."""
    tokens.save("t1")
    controller.bootstrap()
    service.calls.clear()
    return controller
