"""Gestion centralisée de la configuration du client Vitrine."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "http://127.0.0.1:3000/api"
DEFAULT_TOKEN_PATH = ".vitrine_token"
DEFAULT_LOG_LEVEL = "WARNING"


class ConfigError(RuntimeError):
    """Erreur levée lorsque la configuration est invalide."""


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Paramètres nécessaires pour dialoguer avec l'API du catalogue."""

    api_url: str = DEFAULT_API_URL
    token_path: str = DEFAULT_TOKEN_PATH
    timeout: float | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    def endpoint(self, path: str) -> str:
        """Construit l'URL complète d'un chemin de l'API."""
        return f"{self.api_url.rstrip('/')}/{path.lstrip('/')}"


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigError(f"VITRINE_TIMEOUT doit être un nombre, reçu : {raw!r}") from exc
    if timeout <= 0:
        raise ConfigError("VITRINE_TIMEOUT doit être strictement positif.")
    return timeout


def load_config() -> AppConfig:
    """Charge la configuration depuis l'environnement (et le fichier .env)."""
    load_dotenv()

    api_url = os.getenv("VITRINE_API_URL", DEFAULT_API_URL).strip()
    if not api_url:
        raise ConfigError("VITRINE_API_URL ne peut pas être vide.")

    token_path = os.getenv("VITRINE_TOKEN_PATH", DEFAULT_TOKEN_PATH)
    timeout = _parse_timeout(os.getenv("VITRINE_TIMEOUT"))

    log_level = os.getenv("VITRINE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Niveau de log inconnu : {log_level}")

    return AppConfig(
        api_url=api_url,
        token_path=token_path,
        timeout=timeout,
        log_level=log_level,
    )
