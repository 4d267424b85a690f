import enum
import logging

from notesync.client.api import ApiClient, RemoteServiceError
from notesync.client.storage import FileStorage, TOKEN_KEY, USER_KEY, SKIPPED_KEY

logger = logging.getLogger("notesync.client.session")


class AuthState(str, enum.Enum):
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    # choix local de ne pas se connecter: se comporte comme UNAUTHENTICATED pour la synchro
    SKIPPED = "skipped"


class SessionGate:
    """
    Owns the authentication state and the bearer token handed to the API client.

    The remote service is only reachable through this gate while the state
    is AUTHENTICATED; logout and skip withdraw the token from the client.
    """

    def __init__(self, storage: FileStorage, api: ApiClient) -> None:
        self.storage = storage
        self.api = api
        self.state = AuthState.UNAUTHENTICATED
        self.user: dict | None = None
        self.token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def restore(self) -> AuthState:
        """Reload a persisted session at startup."""
        token = self.storage.get_item(TOKEN_KEY)
        user = self.storage.get_item(USER_KEY)
        if token and user:
            self._enter(token, user)
        elif self.storage.get_item(SKIPPED_KEY):
            self._leave(AuthState.SKIPPED)
        else:
            self._leave(AuthState.UNAUTHENTICATED)
        return self.state

    def login(self, email: str, password: str) -> dict:
        response = self.api.login(email, password)
        self._persist(response)
        logger.info("session_started", extra={"user_id": response["user"]["id"], "via": "login"})
        return response["user"]

    def register(self, email: str, username: str, password: str) -> dict:
        response = self.api.register(email, username, password)
        self._persist(response)
        logger.info("session_started", extra={"user_id": response["user"]["id"], "via": "register"})
        return response["user"]

    def logout(self) -> None:
        if self.is_authenticated:
            try:
                self.api.logout()
            except RemoteServiceError as e:
                # le token reste valide côté serveur jusqu'à expiration
                logger.warning("token_revoke_failed", extra={"code": e.code, "error": e.message})
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)
        self.storage.remove_item(SKIPPED_KEY)
        self._leave(AuthState.UNAUTHENTICATED)
        logger.info("session_ended")

    def skip(self) -> None:
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)
        self.storage.set_item(SKIPPED_KEY, True)
        self._leave(AuthState.SKIPPED)
        logger.info("session_skipped")

    def _persist(self, response: dict) -> None:
        self.storage.set_item(TOKEN_KEY, response["token"])
        self.storage.set_item(USER_KEY, response["user"])
        self.storage.remove_item(SKIPPED_KEY)
        self._enter(response["token"], response["user"])

    def _enter(self, token: str, user: dict) -> None:
        self.token = token
        self.user = user
        self.state = AuthState.AUTHENTICATED
        self.api.set_token(token)

    def _leave(self, state: AuthState) -> None:
        self.token = None
        self.user = None
        self.state = state
        self.api.set_token(None)
