"""Encapsulation des appels HTTP à l'API du catalogue."""

from __future__ import annotations

import logging
from typing import Any

import requests

from vitrine.config import AppConfig
from vitrine.models import Credentials

logger = logging.getLogger(__name__)

AUTH_HEADER = "authorization"


class CatalogServiceError(RuntimeError):
    """Erreur générique levée lors des appels à l'API du catalogue."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def error_code(self) -> str | None:
        """Valeur du champ ``error`` renvoyé par le serveur, s'il existe."""
        value = self.payload.get("error")
        return value if isinstance(value, str) else None


class CatalogConnectionError(CatalogServiceError):
    """La requête n'a obtenu aucune réponse HTTP."""


class CatalogService:
    """Client responsable de l'authentification et des appels au catalogue."""

    def __init__(self, config: AppConfig, *, session: requests.Session | None = None) -> None:
        self._config = config
        self._session = session or requests.Session()

    # ---------------------------------------------------------------- Auth -
    def login(self, credentials: Credentials) -> str:
        """Ouvre une session et retourne le jeton émis par le serveur."""
        body = self._request("POST", "/auth/login", json=credentials.as_payload())
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise CatalogServiceError("Réponse de connexion sans jeton.", payload=_as_dict(body))
        return token

    def register(self, credentials: Credentials) -> dict[str, Any]:
        return self._request("POST", "/auth/register", json=credentials.as_payload())

    def current_user(self, token: str) -> dict[str, Any]:
        """Retourne l'identité associée au jeton."""
        body = self._request("GET", "/auth/me", token=token)
        if not isinstance(body, dict):
            raise CatalogServiceError("Réponse d'identité inattendue.")
        return body

    # ------------------------------------------------------------- Catalog -
    def list_products(self) -> list[dict[str, Any]]:
        return _expect_records(self._request("GET", "/products"), "/products")

    def list_favorites(self, user_id: Any, token: str | None) -> list[dict[str, Any]]:
        path = f"/users/{user_id}/favorites"
        return _expect_records(self._request("GET", path, token=token), path)

    def add_favorite(self, user_id: Any, product_id: Any, token: str | None) -> dict[str, Any]:
        """Crée le favori et retourne l'enregistrement renvoyé par le serveur."""
        body = self._request(
            "POST",
            f"/users/{user_id}/favorites",
            json={"product_id": product_id},
            token=token,
        )
        if not isinstance(body, dict):
            raise CatalogServiceError("Réponse de création de favori sans enregistrement.")
        return body

    def remove_favorite(self, user_id: Any, favorite_id: Any, token: str | None) -> None:
        self._request("DELETE", f"/users/{user_id}/favorites/{favorite_id}", token=token)

    # ------------------------------------------------------------ Internal -
    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        token: str | None = None,
    ) -> Any:
        headers: dict[str, str] = {}
        if token is not None:
            headers[AUTH_HEADER] = token

        url = self._config.endpoint(path)
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                json=json,
                headers=headers,
                timeout=self._config.timeout,
            )
        except requests.RequestException as exc:
            raise CatalogConnectionError(f"Impossible de joindre {url}.") from exc

        body = _decode(response)
        if not response.ok:
            raise CatalogServiceError(
                f"{method} {path} a échoué ({response.status_code}).",
                status_code=response.status_code,
                payload=_as_dict(body),
            )
        return body


def _decode(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _as_dict(body: Any) -> dict[str, Any]:
    return body if isinstance(body, dict) else {}


def _expect_records(body: Any, path: str) -> list[dict[str, Any]]:
    if not isinstance(body, list) or not all(isinstance(item, dict) for item in body):
        raise CatalogServiceError(f"Réponse inattendue pour {path}.")
    return body
