"""Contrôleur de session et de catalogue.

Le contrôleur possède tout l'état mutable côté client et passe par lui pour
chaque appel réseau. Chaque opération publique retourne un ``StateSnapshot``
que l'interface utilise pour se redessiner.

Les favoris suivent l'identité connectée : ``fetch_favorites`` est abonné aux
changements d'identité et s'exécute une fois la nouvelle identité enregistrée.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from vitrine.models import Credentials, User
from vitrine.services import CatalogConnectionError, CatalogService, CatalogServiceError, TokenStore
from vitrine.state import AppState, StateSnapshot

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = "not authorized"

LOGIN_RETRY_MESSAGE = "Unable to login, please try again."
PASSWORD_HINT_MESSAGE = "Password is incorrect (hint: must be at least 4 characters)."
UNKNOWN_USER_MESSAGE = "User does not exist."
PASSWORD_TOO_SHORT_MESSAGE = "Please enter a password with at least 4 characters."
REGISTERED_NO_LOGIN_MESSAGE = "Account registered but unable to login at this time."
ACCOUNT_EXISTS_MESSAGE = "Account may already exist, please try again."
PRODUCTS_ERROR_MESSAGE = "Unable to load products."
FAVORITES_ERROR_MESSAGE = "Unable to load favorites."

IdentityListener = Callable[[User | None], None]


class SessionController:
    """Orchestre la session utilisateur, le catalogue et les favoris."""

    def __init__(
        self,
        service: CatalogService,
        tokens: TokenStore,
        state: AppState | None = None,
    ) -> None:
        self._service = service
        self._tokens = tokens
        self._state = state or AppState()
        self._identity_listeners: list[IdentityListener] = []
        self._started = False

        self.subscribe_identity(self._on_identity_changed)

    @property
    def state(self) -> AppState:
        return self._state

    def snapshot(self) -> StateSnapshot:
        return self._state.snapshot()

    def subscribe_identity(self, listener: IdentityListener) -> Callable[[], None]:
        """Abonne ``listener`` aux changements d'identité et retourne le désabonnement."""
        self._identity_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._identity_listeners:
                self._identity_listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------ Startup -
    def start(self) -> StateSnapshot:
        """Restaure la session puis charge le catalogue, une seule fois."""
        if self._started:
            return self.snapshot()
        self._started = True
        self.bootstrap()
        return self.fetch_products()

    def bootstrap(self) -> StateSnapshot:
        self._authenticate_from_token()
        return self.snapshot()

    def fetch_products(self) -> StateSnapshot:
        try:
            products = self._service.list_products()
        except CatalogServiceError as exc:
            logger.warning("Chargement des produits impossible : %s %s", exc, exc.payload)
            self._state.products_error = PRODUCTS_ERROR_MESSAGE
            return self.snapshot()

        self._state.set_products(products or [])
        self._state.products_error = None
        logger.debug("%d produits chargés", len(self._state.products))
        return self.snapshot()

    def fetch_favorites(self) -> StateSnapshot:
        self._load_favorites()
        return self.snapshot()

    def retry_catalog(self) -> StateSnapshot:
        """Relance les chargements après une erreur affichée dans le bandeau."""
        self._state.products_error = None
        self._state.favorites_error = None
        self.fetch_products()
        if self._state.is_authenticated:
            self._load_favorites()
        return self.snapshot()

    # --------------------------------------------------------------- Auth -
    def login(self, credentials: Credentials) -> StateSnapshot:
        # Effacé à l'envoi : une erreur de cette requête reste donc visible.
        self._state.login_error = None
        try:
            self._login(credentials)
        except CatalogConnectionError as exc:
            logger.warning("Serveur injoignable pendant la connexion : %s", exc)
            self._state.login_error = LOGIN_RETRY_MESSAGE
        return self.snapshot()

    def register(self, credentials: Credentials) -> StateSnapshot:
        if not credentials.password_is_long_enough:
            self._state.register_error = PASSWORD_TOO_SHORT_MESSAGE
            return self.snapshot()

        self._state.register_error = None
        try:
            self._service.register(credentials)
        except CatalogServiceError as exc:
            logger.info("Inscription refusée pour %s : %s", credentials.username, exc.payload)
            self._state.register_error = ACCOUNT_EXISTS_MESSAGE
            return self.snapshot()

        try:
            self._login(credentials)
        except CatalogConnectionError as exc:
            logger.warning("Compte créé mais connexion impossible : %s", exc)
            self._state.register_error = REGISTERED_NO_LOGIN_MESSAGE
        return self.snapshot()

    def logout(self) -> StateSnapshot:
        self._tokens.clear()
        self._set_authenticated_user(None)
        return self.snapshot()

    def toggle_form(self) -> StateSnapshot:
        self._state.presenting_login_form = not self._state.presenting_login_form
        return self.snapshot()

    # ---------------------------------------------------------- Favorites -
    def add_favorite(self, product_id: Any) -> StateSnapshot:
        if not self._state.is_authenticated:
            logger.warning("Ajout de favori ignoré : aucun utilisateur connecté")
            return self.snapshot()

        try:
            favorite = self._service.add_favorite(
                self._state.user_id, product_id, self._tokens.load()
            )
        except CatalogServiceError as exc:
            logger.warning("Ajout du favori %s impossible : %s %s", product_id, exc, exc.payload)
            return self.snapshot()

        self._state.set_favorites([*self._state.favorites, favorite])
        return self.snapshot()

    def remove_favorite(self, favorite_id: Any) -> StateSnapshot:
        if not self._state.is_authenticated:
            logger.warning("Suppression de favori ignorée : aucun utilisateur connecté")
            return self.snapshot()

        try:
            self._service.remove_favorite(self._state.user_id, favorite_id, self._tokens.load())
        except CatalogServiceError as exc:
            logger.warning("Suppression du favori %s impossible : %s %s", favorite_id, exc, exc.payload)
            return self.snapshot()

        self._state.set_favorites(
            favorite for favorite in self._state.favorites if favorite.get("id") != favorite_id
        )
        return self.snapshot()

    def toggle_favorite(self, product_id: Any) -> StateSnapshot:
        """Retire le produit des favoris s'il y est, l'ajoute sinon."""
        favorite = self._state.favorite_for(product_id)
        if favorite is not None:
            return self.remove_favorite(favorite.get("id"))
        return self.add_favorite(product_id)

    # ----------------------------------------------------------- Internal -
    def _login(self, credentials: Credentials) -> None:
        """Connexion proprement dite ; laisse remonter CatalogConnectionError."""
        try:
            token = self._service.login(credentials)
        except CatalogConnectionError:
            raise
        except CatalogServiceError as exc:
            logger.info("Connexion refusée pour %s : %s", credentials.username, exc.payload)
            if exc.error_code == NOT_AUTHORIZED:
                self._state.login_error = PASSWORD_HINT_MESSAGE
            else:
                self._state.login_error = UNKNOWN_USER_MESSAGE
            return

        self._tokens.save(token)
        self._authenticate_from_token()

    def _authenticate_from_token(self) -> None:
        token = self._tokens.load()
        if not token:
            return

        try:
            user = self._service.current_user(token)
        except CatalogConnectionError as exc:
            # Serveur injoignable : le jeton n'est pas mis en cause.
            logger.warning("Vérification du jeton impossible : %s", exc)
            self._state.login_error = LOGIN_RETRY_MESSAGE
            return
        except CatalogServiceError as exc:
            logger.warning("Jeton refusé, suppression : %s %s", exc, exc.payload)
            self._state.login_error = LOGIN_RETRY_MESSAGE
            self._tokens.clear()
            return

        logger.info("Connecté en tant que %s", user.get("username"))
        self._set_authenticated_user(user)

    def _set_authenticated_user(self, user: User | None) -> None:
        """Enregistre l'identité ; les abonnés ne sont notifiés que si elle change."""
        previous = self._state.authenticated_user
        self._state.authenticated_user = user
        if user == previous:
            return
        for listener in list(self._identity_listeners):
            listener(user)

    def _on_identity_changed(self, user: User | None) -> None:
        self._load_favorites()

    def _load_favorites(self) -> None:
        if not self._state.is_authenticated:
            self._state.clear_favorites()
            self._state.favorites_error = None
            return

        try:
            favorites = self._service.list_favorites(self._state.user_id, self._tokens.load())
        except CatalogServiceError as exc:
            logger.warning("Chargement des favoris impossible : %s %s", exc, exc.payload)
            self._state.favorites_error = FAVORITES_ERROR_MESSAGE
            return

        self._state.set_favorites(favorites or [])
        self._state.favorites_error = None
