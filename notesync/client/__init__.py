from dataclasses import dataclass

import httpx

from notesync.config import ClientConfig
from notesync.client.api import ApiClient
from notesync.client.local_store import LocalNoteStore
from notesync.client.session import SessionGate
from notesync.client.storage import FileStorage, ThemePreference
from notesync.client.sync import SyncOrchestrator


@dataclass
class NotesClient:
    storage: FileStorage
    api: ApiClient
    session: SessionGate
    local: LocalNoteStore
    sync: SyncOrchestrator
    theme: ThemePreference

    def close(self) -> None:
        self.api.close()


def create_client(storage_dir: str | None = None, base_url: str | None = None,
                  timeout: float | None = None, transport: httpx.BaseTransport | None = None) -> NotesClient:
    """Wire the device components together and reload any persisted session."""
    storage = FileStorage(storage_dir or ClientConfig.STORAGE_DIR)
    api = ApiClient(base_url, timeout=timeout, transport=transport)
    session = SessionGate(storage, api)
    local = LocalNoteStore(storage)
    session.restore()
    return NotesClient(
        storage=storage,
        api=api,
        session=session,
        local=local,
        sync=SyncOrchestrator(session, api, local),
        theme=ThemePreference(storage),
    )
