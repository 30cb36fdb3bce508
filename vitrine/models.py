"""Types de données échangés avec l'API du catalogue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Les enregistrements renvoyés par le serveur sont conservés tels quels.
User = dict[str, Any]
Product = dict[str, Any]
Favorite = dict[str, Any]

MIN_PASSWORD_LENGTH = 4


@dataclass(frozen=True, slots=True)
class Credentials:
    """Identifiants saisis dans un formulaire, jamais persistés."""

    username: str
    password: str

    @property
    def is_complete(self) -> bool:
        """Vrai si les deux champs sont renseignés (bouton d'envoi actif)."""
        return bool(self.username) and bool(self.password)

    @property
    def password_is_long_enough(self) -> bool:
        return len(self.password) >= MIN_PASSWORD_LENGTH

    def as_payload(self) -> dict[str, str]:
        return {"username": self.username, "password": self.password}

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"
