"""Stockage persistant du jeton de session."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class TokenStore:
    """Conserve le jeton de session dans un petit fichier JSON."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        """Retourne le jeton enregistré, ou None s'il est absent ou illisible."""
        if not self._path.exists():
            return None

        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            token = payload[TOKEN_KEY]
        except (json.JSONDecodeError, KeyError, OSError, TypeError):
            logger.warning("Fichier de jeton illisible, suppression de %s", self._path)
            self.clear()
            return None

        if not isinstance(token, str) or not token:
            self.clear()
            return None
        return token

    def save(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({TOKEN_KEY: token}), encoding="utf-8")

    def clear(self) -> None:
        """Supprime le jeton enregistré."""
        try:
            os.remove(self._path)
        except FileNotFoundError:
            pass
