"""
Sync Orchestrator.

Every mutating note action goes through here. With a session the cloud is
tried first; any remote failure (network, timeout, auth, non-2xx) degrades
to the equivalent operation on the device store. The fallback is one-shot:
nothing is queued or retried, the note is only marked ``pending-push``.

Without a session only the device store is touched and the API client is
never called.
"""

import enum
import logging
from dataclasses import dataclass, field

from notesync.client.api import ApiClient, RemoteServiceError, RemoteUnavailableError
from notesync.client.local_store import (
    LocalNoteStore, LOCAL_ONLY, PENDING_PUSH, filter_notes, new_note_id, normalize_fields,
)
from notesync.client.session import SessionGate
from notesync.client.storage import LocalStorageError

logger = logging.getLogger("notesync.client.sync")

_VERBS = {
    "create": "saved",
    "update": "updated",
    "pin": "pin toggled",
    "delete": "moved to trash",
    "restore": "restored",
    "list": "loaded",
    "trash": "loaded",
}


def _cloud_failure(error: RemoteServiceError) -> str:
    if isinstance(error, RemoteUnavailableError):
        return f"Could not reach the cloud ({error.message})"
    if error.code == "bad_response":
        return f"The cloud answered with an unusable response ({error.message})"
    return f"The cloud rejected the change ({error.message})"


class SyncOutcome(str, enum.Enum):
    CLOUD = "cloud"
    # pas de session: l'appareil est la seule copie
    LOCAL = "local"
    # session présente mais le cloud a échoué: copie appareil uniquement, non planifiée
    LOCAL_FALLBACK = "local-fallback"


@dataclass
class SyncResult:
    operation: str
    outcome: SyncOutcome
    note: dict | None = None
    notes: list[dict] = field(default_factory=list)
    remote_error: RemoteServiceError | None = None

    @property
    def synced(self) -> bool:
        return self.outcome is SyncOutcome.CLOUD

    @property
    def message(self) -> str:
        subject = "Notes" if self.operation in ("list", "trash") else "Note"
        verb = _VERBS[self.operation]
        if self.outcome is SyncOutcome.CLOUD:
            return f"{subject} {verb} in the cloud."
        if self.outcome is SyncOutcome.LOCAL:
            return f"{subject} {verb} on this device. Sign in to sync across devices."
        return (
            f"{_cloud_failure(self.remote_error)}. "
            f"{subject} {verb} on this device only; the change is not queued for sync."
        )


class SyncFailure(Exception):
    """Neither tier holds the change; ``tier`` names the last one tried."""

    tier = "device"

    def __init__(self, operation: str, reason: str, remote_error: RemoteServiceError | None = None) -> None:
        self.operation = operation
        self.reason = reason
        self.remote_error = remote_error
        if remote_error is not None:
            message = (f"{_cloud_failure(remote_error)} and the note could not be "
                       f"{_VERBS[operation]} on this device: {reason}")
        else:
            message = f"The note could not be {_VERBS[operation]} on this device: {reason}"
        super().__init__(message)
        self.message = message


class SyncOrchestrator:
    def __init__(self, session: SessionGate, api: ApiClient, local: LocalNoteStore) -> None:
        self.session = session
        self.api = api
        self.local = local

    def _run(self, operation, remote_call, local_call, note_id=None) -> SyncResult:
        if not self.session.is_authenticated:
            note = self._local(operation, local_call, LOCAL_ONLY, None)
            logger.info("note_sync", extra={"operation": operation, "note_id": note_id, "outcome": SyncOutcome.LOCAL.value})
            return SyncResult(operation, SyncOutcome.LOCAL, note=note)

        try:
            note = remote_call()
        except RemoteServiceError as e:
            logger.warning("note_sync_remote_failed", extra={
                "operation": operation, "note_id": note_id, "code": e.code, "status": e.status_code,
            })
            note = self._local(operation, local_call, PENDING_PUSH, e)
            logger.info("note_sync", extra={"operation": operation, "note_id": note_id, "outcome": SyncOutcome.LOCAL_FALLBACK.value})
            return SyncResult(operation, SyncOutcome.LOCAL_FALLBACK, note=note, remote_error=e)

        logger.info("note_sync", extra={"operation": operation, "note_id": note_id, "outcome": SyncOutcome.CLOUD.value})
        return SyncResult(operation, SyncOutcome.CLOUD, note=note)

    def _local(self, operation, local_call, sync_state, remote_error):
        try:
            note = local_call(sync_state)
        except LocalStorageError as e:
            raise SyncFailure(operation, str(e), remote_error) from e
        if note is None:
            raise SyncFailure(operation, "note not found on this device", remote_error)
        return note

    def _ensure_local(self, note_id, current, sync_state):
        # une note connue du seul cloud est copiée sur l'appareil avant la modification de repli
        if current is not None and self.local.get(note_id, include_trashed=True) is None:
            self.local.save({**current, "id": note_id}, sync_state)

    # --- Mutations ---
    def create(self, fields: dict) -> SyncResult:
        """Create a note; the same device-generated id is used on both tiers."""
        payload = normalize_fields({"title": "", "content": "", **fields})
        payload["id"] = payload.get("id") or new_note_id()
        note_id = payload["id"]
        return self._run(
            "create",
            lambda: self.api.create_note(payload),
            lambda state: self.local.save(payload, state),
            note_id,
        )

    def update(self, note_id: str, changes: dict, current: dict | None = None) -> SyncResult:
        changes = normalize_fields(changes)

        def local_call(state):
            self._ensure_local(note_id, current, state)
            return self.local.update(note_id, changes, state)

        return self._run("update", lambda: self.api.update_note(note_id, changes), local_call, note_id)

    def toggle_pin(self, note_id: str, current: dict | None = None) -> SyncResult:
        def local_call(state):
            self._ensure_local(note_id, current, state)
            return self.local.toggle_pin(note_id, state)

        return self._run("pin", lambda: self.api.toggle_pin(note_id), local_call, note_id)

    def delete(self, note_id: str, current: dict | None = None) -> SyncResult:
        def remote_call():
            self.api.delete_note(note_id)
            return None

        def local_call(state):
            self._ensure_local(note_id, current, state)
            return self.local.delete(note_id, state)

        return self._run("delete", remote_call, local_call, note_id)

    def restore(self, note_id: str) -> SyncResult:
        return self._run(
            "restore",
            lambda: self.api.restore_note(note_id),
            lambda state: self.local.restore(note_id, state),
            note_id,
        )

    # --- Lectures ---
    def list_notes(self, search=None, category=None, sort_by="date", order="desc") -> SyncResult:
        def local_notes():
            return filter_notes(self.local.list(), search, category, sort_by, order)

        if not self.session.is_authenticated:
            return SyncResult("list", SyncOutcome.LOCAL, notes=local_notes())
        try:
            notes = self.api.list_notes(search=search, category=category, sort_by=sort_by, order=order)
        except RemoteServiceError as e:
            logger.warning("note_list_remote_failed", extra={"code": e.code, "status": e.status_code})
            return SyncResult("list", SyncOutcome.LOCAL_FALLBACK, notes=local_notes(), remote_error=e)
        return SyncResult("list", SyncOutcome.CLOUD, notes=notes)

    def list_trash(self) -> SyncResult:
        if not self.session.is_authenticated:
            return SyncResult("trash", SyncOutcome.LOCAL, notes=self.local.list_trash())
        try:
            notes = self.api.list_trash()
        except RemoteServiceError as e:
            logger.warning("note_trash_remote_failed", extra={"code": e.code, "status": e.status_code})
            return SyncResult("trash", SyncOutcome.LOCAL_FALLBACK, notes=self.local.list_trash(), remote_error=e)
        return SyncResult("trash", SyncOutcome.CLOUD, notes=notes)

    def share(self, note_id: str, email: str, permission: str = "view") -> dict:
        """Share through the cloud only; there is no device-side equivalent."""
        return self.api.share_note(note_id, email.strip(), permission)
