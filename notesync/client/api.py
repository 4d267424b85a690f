"""
HTTP client for the notes API.

Every call carries an explicit timeout; expiry is reported like any other
transport failure so callers can apply one fallback path.
"""

import logging
from typing import Any

import httpx

from notesync.config import ClientConfig

logger = logging.getLogger("notesync.client.api")


class RemoteServiceError(Exception):
    """The cloud tier did not accept the request."""

    tier = "cloud"

    def __init__(self, message: str, status_code: int | None = None, code: str = "remote_error", details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}


class RemoteUnavailableError(RemoteServiceError):
    """Network failure or timeout: the request may never have reached the server."""

    def __init__(self, message: str = "Cannot connect to server. Please check your internet connection.") -> None:
        super().__init__(message, code="unavailable")


class NotAuthenticatedError(RemoteServiceError):
    """A bearer endpoint was called without a session token."""

    def __init__(self, message: str = "Not signed in.") -> None:
        super().__init__(message, status_code=401, code="not_authenticated")


class ApiClient:
    """
    Client for the notes API.

    Usage:
        api = ApiClient("https://notes.example.com/api")
        session = api.login("me@example.com", "secret")
        api.set_token(session["token"])
        notes = api.list_notes(search="milk")
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None, transport: httpx.BaseTransport | None = None):
        self.base_url = (base_url or ClientConfig.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else ClientConfig.API_TIMEOUT
        self.token: str | None = None
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()
        self._client = None

    def set_token(self, token: str | None) -> None:
        self.token = token

    def request(self, method: str, path: str, auth: bool = True, **kwargs: Any) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            NotAuthenticatedError: auth required and no token is set
            RemoteUnavailableError: transport error or timeout
            RemoteServiceError: non-2xx response, or a 2xx body that is not a JSON object
        """
        headers = kwargs.pop("headers", {})
        if auth:
            if not self.token:
                raise NotAuthenticatedError()
            headers["Authorization"] = f"Bearer {self.token}"

        logger.debug("api_request", extra={"method": method, "path": path})
        try:
            response = self._get_client().request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("api_timeout", extra={"method": method, "path": path, "timeout": self.timeout})
            raise RemoteUnavailableError(f"Request timed out after {self.timeout}s.") from e
        except httpx.HTTPError as e:
            logger.warning("api_unreachable", extra={"method": method, "path": path, "error": str(e)})
            raise RemoteUnavailableError() from e

        try:
            body = response.json()
        except ValueError:
            body = None

        logger.debug("api_response", extra={"method": method, "path": path, "status": response.status_code})
        if response.is_success:
            # un 2xx qui n'est pas un objet JSON vient d'ailleurs (portail captif, proxy)
            if not isinstance(body, dict):
                logger.warning("api_bad_response", extra={"method": method, "path": path, "status": response.status_code})
                raise RemoteServiceError(
                    "The server sent a response that is not a notes API response.",
                    status_code=response.status_code,
                    code="bad_response",
                )
            return body

        error = body.get("error", {}) if isinstance(body, dict) else {}
        raise RemoteServiceError(
            error.get("message") or f"Request failed with status {response.status_code}",
            status_code=response.status_code,
            code=error.get("code", "http_error"),
            details=error.get("details"),
        )

    @staticmethod
    def _data(body: dict) -> list[dict]:
        data = body.get("data")
        if not isinstance(data, list):
            raise RemoteServiceError("The server response has no note list.", code="bad_response")
        return data

    # --- Auth ---
    def register(self, email: str, username: str, password: str) -> dict:
        return self.request("POST", "/auth/register", auth=False,
                            json={"email": email, "username": username, "password": password})

    def login(self, email: str, password: str) -> dict:
        return self.request("POST", "/auth/login", auth=False, json={"email": email, "password": password})

    def logout(self) -> dict:
        return self.request("POST", "/auth/logout")

    # --- Notes ---
    def list_notes(self, search=None, category=None, sort_by=None, order=None) -> list[dict]:
        params = {"search": search, "category": category, "sortBy": sort_by, "order": order}
        body = self.request("GET", "/notes", params={k: v for k, v in params.items() if v})
        return self._data(body)

    def get_note(self, note_id: str) -> dict:
        return self.request("GET", f"/notes/{note_id}")

    def create_note(self, data: dict) -> dict:
        return self.request("POST", "/notes", json=data)

    def update_note(self, note_id: str, data: dict) -> dict:
        return self.request("PUT", f"/notes/{note_id}", json=data)

    def toggle_pin(self, note_id: str) -> dict:
        return self.request("PATCH", f"/notes/{note_id}/pin")

    def delete_note(self, note_id: str) -> dict:
        return self.request("DELETE", f"/notes/{note_id}")

    def restore_note(self, note_id: str) -> dict:
        return self.request("PATCH", f"/notes/{note_id}/restore")

    def list_trash(self) -> list[dict]:
        return self._data(self.request("GET", "/notes/trash/all"))

    def add_attachment(self, note_id: str, data: dict) -> dict:
        return self.request("POST", f"/notes/{note_id}/attachments", json=data)

    def share_note(self, note_id: str, email: str, permission: str = "view") -> dict:
        return self.request("POST", f"/notes/{note_id}/share", json={"email": email, "permission": permission})

    # --- Profile ---
    def get_profile(self) -> dict:
        return self.request("GET", "/user/profile")

    def update_profile(self, username: str) -> dict:
        return self.request("PUT", "/user/profile", json={"username": username})
