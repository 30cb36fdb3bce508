"""Point d'entrée de l'application Vitrine."""

from __future__ import annotations

import logging

from vitrine.config import load_config
from vitrine.controller import SessionController
from vitrine.services import CatalogService, TokenStore
from vitrine.ui.app import MainWindow


def main() -> None:
    """Initialise les dépendances puis lance l'interface Tkinter."""
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    service = CatalogService(config)
    controller = SessionController(service=service, tokens=TokenStore(config.token_path))
    app = MainWindow(controller=controller)
    app.run()


if __name__ == "__main__":
    main()
